# finance_tracker/routers/transactions.py
# Transaction CRUD and summary endpoints

from fastapi import APIRouter, Body, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
import logging

from .. import models, schemas
from ..dependencies import get_current_user, get_db
from ..errors import ServiceError
from ..transaction_service import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter()

def serialize_transaction(txn: models.Transaction) -> Dict[str, Any]:
    """Stable resource shape returned by every transaction endpoint."""
    return {
        "id": txn.id,
        "type": txn.type,
        "category": txn.category,
        "amount": float(txn.amount),
        "date": txn.date.isoformat(),
        "description": txn.description,
        "created_at": txn.created_at.isoformat(),
        "updated_at": txn.updated_at.isoformat()
    }

def _present(**params) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}

def _internal_error(db: Session, action: str, error: Exception) -> HTTPException:
    db.rollback()
    logger.exception(f"Failed to {action}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(error)}"
    )

# ===== LISTING =====

@router.get("")
async def list_transactions(
    type: Optional[str] = Query(None, description="income or expense"),
    category: Optional[str] = Query(None, description="Filter by category"),
    date_from: Optional[str] = Query(None, description="Created on or after this date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="Created on or before this date (YYYY-MM-DD)"),
    per_page: Optional[str] = Query(None, description="Page size, 1-100 (larger values are clamped)"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    sort: Optional[str] = Query(None, description="Column to sort by, '-' prefix for descending"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the caller's transactions with filtering, sorting and pagination."""
    filters = schemas.parse(schemas.TransactionFilter, _present(
        type=type, category=category, date_from=date_from, date_to=date_to,
        per_page=per_page, page=page, sort=sort
    ))

    try:
        result = TransactionService(current_user.id, db).paginate(filters)
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error(db, "list transactions", e)

    return {
        "data": [serialize_transaction(txn) for txn in result["items"]],
        "meta": {
            "total": result["total"],
            "current_page": result["current_page"],
            "per_page": result["per_page"],
            "last_page": result["last_page"]
        }
    }

# ===== SUMMARIES =====

@router.get("/summary/monthly")
async def monthly_summary(
    months: Optional[str] = Query(None, description="How many months back to include (default 6)"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Income, expense and combined totals per calendar month, newest first."""
    params = schemas.parse(schemas.MonthlySummaryParams, _present(months=months))

    try:
        summary = TransactionService(current_user.id, db).sum_by_month(params.months)
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error(db, "build monthly summary", e)

    return {
        "data": {
            month: {key: float(value) for key, value in totals.items()}
            for month, totals in summary.items()
        }
    }

@router.get("/summary/type/{transaction_type}")
async def type_summary(
    transaction_type: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total amount across every transaction of one type."""
    filters = schemas.parse(schemas.TransactionFilter, {"type": transaction_type})
    total = TransactionService(current_user.id, db).type_total(filters.type)
    return {"data": {"type": filters.type, "total": float(total)}}

@router.get("/summary/category/{category}")
async def category_summary(
    category: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total amount across every transaction in one category."""
    total = TransactionService(current_user.id, db).category_total(category)
    return {"data": {"category": category, "total": float(total)}}

# ===== TRANSACTION CRUD =====

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: Dict[str, Any] = Body(...),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new transaction; ``date`` defaults to today."""
    payload = schemas.parse(schemas.TransactionCreate, transaction_data)

    try:
        transaction = TransactionService(current_user.id, db).create(payload)
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error(db, "create transaction", e)

    return {"data": serialize_transaction(transaction)}

@router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a specific transaction by ID."""
    transaction = TransactionService(current_user.id, db).find(transaction_id)
    return {"data": serialize_transaction(transaction)}

@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    transaction_data: Dict[str, Any] = Body(...),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update any subset of a transaction's writable fields."""
    payload = schemas.parse(schemas.TransactionUpdate, transaction_data)

    try:
        transaction = TransactionService(current_user.id, db).update(transaction_id, payload)
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error(db, "update transaction", e)

    return {"data": serialize_transaction(transaction)}

@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a transaction."""
    try:
        TransactionService(current_user.id, db).delete(transaction_id)
    except ServiceError:
        raise
    except Exception as e:
        raise _internal_error(db, "delete transaction", e)

    return {"message": "Transaction deleted successfully"}
