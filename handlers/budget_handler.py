"""
handlers/budget_handler.py
---------------------------
Budget routes. Listing returns each budget joined with its month's spending.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from handlers.schemas import BudgetIn, BudgetLimitIn
from security.auth import current_user_id
from services.budget_service import BudgetService

budget_service = BudgetService()

router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@router.post("", status_code=201)
def create_budget(body: BudgetIn, user_id: int = Depends(current_user_id)) -> dict:
    budget = budget_service.create_budget(user_id, body.category, body.limit, body.month, body.year)
    return {"status": "success", "data": {"budget": budget.to_dict()}}


@router.get("")
def list_budgets(
    month: Optional[int] = None,
    year: Optional[int] = None,
    user_id: int = Depends(current_user_id),
) -> dict:
    """Budgets for ?month=MM&year=YYYY (default: current month) with spent, remaining and percentUsed."""
    budgets = budget_service.get_budgets(user_id, month, year)
    return {
        "status": "success",
        "results": len(budgets),
        "data": {"budgets": [b.to_dict(with_usage=True) for b in budgets]},
    }


@router.put("/{budget_id}")
def update_budget(budget_id: int, body: BudgetLimitIn, user_id: int = Depends(current_user_id)) -> dict:
    budget = budget_service.update_budget(budget_id, user_id, body.limit)
    return {"status": "success", "data": {"budget": budget.to_dict()}}


@router.delete("/{budget_id}")
def delete_budget(budget_id: int, user_id: int = Depends(current_user_id)) -> dict:
    budget_service.delete_budget(budget_id, user_id)
    return {"status": "success", "message": "Budget deleted successfully"}
