"""
handlers/transaction_handler.py
--------------------------------
Ledger entry routes. Delegates all logic to TransactionService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from handlers.schemas import TransactionIn
from security.auth import current_user_id
from services.transaction_service import TransactionService

transaction_service = TransactionService()

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.post("", status_code=201)
def create_transaction(body: TransactionIn, user_id: int = Depends(current_user_id)) -> dict:
    tx = transaction_service.create(
        user_id,
        amount=body.amount,
        type_=body.type,
        category=body.category,
        date=body.date,
        description=body.description,
        payment_method=body.payment_method,
    )
    return {"status": "success", "data": {"transaction": tx.to_dict()}}


@router.get("")
def list_transactions(
    type: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    user_id: int = Depends(current_user_id),
) -> dict:
    """Entries filtered by type, category and an inclusive date window, latest first."""
    txs = transaction_service.list(user_id, type, category, start_date, end_date)
    return {
        "status": "success",
        "results": len(txs),
        "data": {"transactions": [t.to_dict() for t in txs]},
    }


@router.put("/{tx_id}")
def update_transaction(tx_id: int, body: TransactionIn, user_id: int = Depends(current_user_id)) -> dict:
    tx = transaction_service.update(tx_id, user_id, body.changes())
    return {"status": "success", "data": {"transaction": tx.to_dict()}}


@router.delete("/{tx_id}")
def delete_transaction(tx_id: int, user_id: int = Depends(current_user_id)) -> dict:
    transaction_service.delete(tx_id, user_id)
    return {"status": "success", "message": "Transaction deleted successfully"}
