# finance_tracker/tests/test_transaction_service.py
# Unit tests for TransactionService aggregation against the test database.

from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_tracker import models, schemas
from finance_tracker.errors import NotFound
from finance_tracker.transaction_service import TransactionService, subtract_months


@pytest.fixture
def user(db_session):
    user = models.User(name="Carol", email="carol@mail.com", hashed_password="x")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def add(db_session, user, type, amount, created_at, category="Misc", txn_date=None):
    txn = models.Transaction(
        user_id=user.id,
        type=type,
        category=category,
        amount=Decimal(str(amount)),
        date=txn_date or created_at.date(),
        created_at=created_at,
        updated_at=created_at,
    )
    db_session.add(txn)
    db_session.commit()
    return txn


@pytest.mark.parametrize("moment, months, expected", [
    (datetime(2024, 6, 15, 12, 0), 1, datetime(2024, 5, 15, 12, 0)),
    (datetime(2024, 3, 31, 8, 30), 1, datetime(2024, 2, 29, 8, 30)),
    (datetime(2024, 1, 10), 1, datetime(2023, 12, 10)),
    (datetime(2024, 8, 31), 6, datetime(2024, 2, 29)),
    (datetime(2024, 5, 5), 17, datetime(2022, 12, 5)),
])
def test_subtract_months(moment, months, expected):
    assert subtract_months(moment, months) == expected


def test_sum_by_month_buckets_newest_first(db_session, user):
    now = datetime(2024, 6, 20, 10, 0)
    add(db_session, user, "income", 1000, datetime(2024, 6, 1, 9, 0))
    add(db_session, user, "expense", 200, datetime(2024, 6, 18, 9, 0))
    add(db_session, user, "expense", 50, datetime(2024, 5, 2, 9, 0))
    add(db_session, user, "income", 10, datetime(2024, 4, 25, 9, 0))
    # Outside the two-month window
    add(db_session, user, "income", 999, datetime(2024, 4, 19, 9, 0))

    summary = TransactionService(user.id, db_session).sum_by_month(2, now=now)

    assert list(summary) == ["2024-06", "2024-05", "2024-04"]
    assert summary["2024-06"] == {
        "total": Decimal("1200"), "income": Decimal("1000"), "expense": Decimal("200")
    }
    assert summary["2024-05"] == {
        "total": Decimal("50"), "income": Decimal("0"), "expense": Decimal("50")
    }
    assert summary["2024-04"]["total"] == Decimal("10")


def test_sum_by_month_ignores_transaction_date(db_session, user):
    """Buckets follow the creation timestamp, not the user-entered date."""
    now = datetime(2024, 6, 20)
    add(db_session, user, "expense", 30, datetime(2024, 6, 3), txn_date=date(2023, 1, 1))

    summary = TransactionService(user.id, db_session).sum_by_month(1, now=now)

    assert list(summary) == ["2024-06"]


def test_totals_by_type_and_category(db_session, user):
    now = datetime(2024, 6, 20)
    add(db_session, user, "income", 100, now, category="Salary")
    add(db_session, user, "expense", 25.5, now, category="Food")
    add(db_session, user, "expense", 4.5, now, category="Food")

    service = TransactionService(user.id, db_session)

    assert service.type_total("expense") == Decimal("30")
    assert service.type_total("income") == Decimal("100")
    assert service.category_total("Food") == Decimal("30")
    assert service.category_total("Rent") == Decimal("0")


def test_find_is_scoped_to_owner(db_session, user):
    other = models.User(name="Dan", email="dan@mail.com", hashed_password="x")
    db_session.add(other)
    db_session.commit()
    txn = add(db_session, user, "income", 5, datetime(2024, 6, 1))

    with pytest.raises(NotFound):
        TransactionService(other.id, db_session).find(txn.id)

    assert TransactionService(user.id, db_session).find(txn.id).id == txn.id


def test_paginate_clamps_page_size(db_session, user):
    filters = schemas.TransactionFilter(per_page=500)
    result = TransactionService(user.id, db_session).paginate(filters)

    assert result["per_page"] == schemas.MAX_PER_PAGE
    assert result["items"] == []
    assert result["last_page"] == 1
