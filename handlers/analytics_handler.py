"""
handlers/analytics_handler.py
------------------------------
Read-only analytics routes. All accept optional ?startDate&endDate
except month-compare, which always looks at this month and the last.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from security.auth import current_user_id
from services.analytics_service import AnalyticsService
from utils.date_helpers import DateRange

analytics_service = AnalyticsService()

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def date_range(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
) -> DateRange:
    return DateRange.from_strings(start_date, end_date)


@router.get("/summary")
def get_summary(window: DateRange = Depends(date_range), user_id: int = Depends(current_user_id)) -> dict:
    return {"status": "success", "data": analytics_service.summary(user_id, window)}


@router.get("/by-category")
def get_by_category(window: DateRange = Depends(date_range), user_id: int = Depends(current_user_id)) -> dict:
    return {"status": "success", "data": analytics_service.by_category(user_id, window)}


@router.get("/trend")
def get_trend(window: DateRange = Depends(date_range), user_id: int = Depends(current_user_id)) -> dict:
    return {"status": "success", "data": {"trend": analytics_service.trend(user_id, window)}}


@router.get("/month-compare")
def get_month_comparison(user_id: int = Depends(current_user_id)) -> dict:
    return {"status": "success", "data": analytics_service.month_compare(user_id)}
