"""
handlers/recurring_handler.py
------------------------------
Recurring rule management routes (create, list, edit, pause/resume, delete).
Executing due rules is not exposed here; it happens at login.
"""

from fastapi import APIRouter, Depends

from handlers.schemas import RecurringIn, StatusIn
from security.auth import current_user_id
from services.recurring_service import RecurringService

recurring_service = RecurringService()

router = APIRouter(prefix="/api/recurring", tags=["recurring"])


@router.post("", status_code=201)
def create_recurring(body: RecurringIn, user_id: int = Depends(current_user_id)) -> dict:
    rule = recurring_service.create(
        user_id,
        title=body.title,
        amount=body.amount,
        type_=body.type,
        category=body.category,
        frequency=body.frequency,
        start_date=body.start_date,
        interval=body.interval,
        end_date=body.end_date,
        payment_method=body.payment_method,
    )
    return {"status": "success", "data": {"recurring": rule.to_dict()}}


@router.get("")
def list_recurring(user_id: int = Depends(current_user_id)) -> dict:
    rules = recurring_service.list(user_id)
    return {
        "status": "success",
        "results": len(rules),
        "data": {"recurring": [r.to_dict() for r in rules]},
    }


@router.put("/{rule_id}")
def update_recurring(rule_id: int, body: RecurringIn, user_id: int = Depends(current_user_id)) -> dict:
    rule = recurring_service.update(rule_id, user_id, body.changes())
    return {"status": "success", "data": {"recurring": rule.to_dict()}}


@router.patch("/{rule_id}/status")
def update_recurring_status(rule_id: int, body: StatusIn, user_id: int = Depends(current_user_id)) -> dict:
    """Pause or resume a rule."""
    rule = recurring_service.set_status(rule_id, user_id, body.status)
    return {"status": "success", "data": {"recurring": rule.to_dict()}}


@router.delete("/{rule_id}")
def delete_recurring(rule_id: int, user_id: int = Depends(current_user_id)) -> dict:
    recurring_service.delete(rule_id, user_id)
    return {"status": "success", "message": "Recurring transaction deleted"}
