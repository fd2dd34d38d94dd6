# finance_tracker/transaction_service.py
# Filtering, pagination and aggregation over a single user's transactions

import calendar
import logging
import math
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import NotFound

logger = logging.getLogger(__name__)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class TransactionService:
    """Transaction operations scoped to one owner.

    Every query starts from ``_owned()``, so a transaction belonging to some
    other user behaves exactly like one that does not exist.
    """

    def __init__(self, user_id: int, db: Session):
        self.user_id = user_id
        self.db = db

    def _owned(self):
        return self.db.query(models.Transaction).filter(
            models.Transaction.user_id == self.user_id
        )

    # ===== CRUD =====

    def create(self, data: schemas.TransactionCreate) -> models.Transaction:
        transaction = models.Transaction(
            type=data.type,
            category=data.category,
            amount=data.amount,
            date=data.date or date.today(),
            description=data.description,
            user_id=self.user_id,
        )
        self.db.add(transaction)
        self.db.commit()
        self.db.refresh(transaction)

        logger.info(f"Created transaction {transaction.id} for user {self.user_id}")
        return transaction

    def find(self, transaction_id: int) -> models.Transaction:
        transaction = self._owned().filter(models.Transaction.id == transaction_id).first()
        if transaction is None:
            raise NotFound("Transaction")
        return transaction

    def update(self, transaction_id: int, data: schemas.TransactionUpdate) -> models.Transaction:
        transaction = self.find(transaction_id)

        changes = data.changes()
        for field, value in changes.items():
            setattr(transaction, field, value)

        if changes:
            self.db.commit()
            self.db.refresh(transaction)
            logger.info(f"Updated transaction {transaction.id} fields: {sorted(changes)}")

        return transaction

    def delete(self, transaction_id: int) -> None:
        transaction = self.find(transaction_id)
        self.db.delete(transaction)
        self.db.commit()
        logger.info(f"Deleted transaction {transaction_id} for user {self.user_id}")

    # ===== LISTING =====

    def paginate(self, filters: schemas.TransactionFilter) -> Dict[str, Any]:
        """Filtered, sorted page of transactions plus pagination metadata."""
        query = self._owned()

        if filters.type:
            query = query.filter(models.Transaction.type == filters.type)

        if filters.category:
            query = query.filter(models.Transaction.category == filters.category)

        # Date bounds apply to the calendar day the record was created
        if filters.date_from:
            query = query.filter(
                models.Transaction.created_at >= datetime.combine(filters.date_from, time.min)
            )

        if filters.date_to:
            query = query.filter(
                models.Transaction.created_at < datetime.combine(filters.date_to + timedelta(days=1), time.min)
            )

        total = query.count()

        if filters.sort_column:
            direction = desc if filters.sort_descending else asc
            column = getattr(models.Transaction, filters.sort_column)
            query = query.order_by(direction(column), direction(models.Transaction.id))
        else:
            query = query.order_by(desc(models.Transaction.created_at), desc(models.Transaction.id))

        items = query.offset((filters.page - 1) * filters.per_page).limit(filters.per_page).all()

        return {
            "items": items,
            "total": total,
            "current_page": filters.page,
            "per_page": filters.per_page,
            "last_page": max(1, math.ceil(total / filters.per_page)),
        }

    # ===== AGGREGATES =====

    def type_total(self, transaction_type: str) -> Decimal:
        """Sum of every amount of one type; no date window applies."""
        total = self._owned().filter(
            models.Transaction.type == transaction_type
        ).with_entities(func.sum(models.Transaction.amount)).scalar()
        return Decimal(total or 0)

    def category_total(self, category: str) -> Decimal:
        """Sum of every amount in one category; no date window applies."""
        total = self._owned().filter(
            models.Transaction.category == category
        ).with_entities(func.sum(models.Transaction.amount)).scalar()
        return Decimal(total or 0)

    def sum_by_month(self, months_back: int = schemas.DEFAULT_SUMMARY_MONTHS,
                     now: Optional[datetime] = None) -> "OrderedDict[str, Dict[str, Decimal]]":
        """Bucket recent transactions by the year-month of ``created_at``.

        Keys come out newest first. ``expense`` is accumulated as a positive
        sum, and ``total`` adds income and expense together.
        """
        now = now or datetime.utcnow()
        since = subtract_months(now, months_back)

        transactions: List[models.Transaction] = self._owned().filter(
            models.Transaction.created_at >= since
        ).order_by(desc(models.Transaction.created_at)).all()

        monthly_totals: "OrderedDict[str, Dict[str, Decimal]]" = OrderedDict()
        for txn in transactions:
            month_key = txn.created_at.strftime("%Y-%m")
            if month_key not in monthly_totals:
                monthly_totals[month_key] = {
                    "total": Decimal("0"),
                    "income": Decimal("0"),
                    "expense": Decimal("0"),
                }

            bucket = monthly_totals[month_key]
            bucket["total"] += txn.amount
            if txn.type == models.TransactionType.INCOME.value:
                bucket["income"] += txn.amount
            else:
                bucket["expense"] += txn.amount

        return monthly_totals
