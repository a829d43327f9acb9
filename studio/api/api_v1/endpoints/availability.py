from fastapi import APIRouter, HTTPException, Query, status
from typing import Dict, Any, List, Optional
from studio.services.availability_service import (
    first_bookable_day, get_available_days, get_bookable_times, is_available
)
from studio.utils.dates import normalize_date, normalize_time, studio_today

router = APIRouter()

def _canonical_date(value: str) -> str:
    try:
        return normalize_date(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid date format. Use YYYY-MM-DD"
        )

def _canonical_time(value: str) -> str:
    try:
        return normalize_time(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid time format. Use HH:MM"
        )

@router.get("/days", response_model=List[int])
async def read_available_days(
    year: int = Query(..., ge=1, le=9999, description="Year to check availability for"),
    month: int = Query(..., description="Month to check availability for (1-12)"),
    from_day: Optional[int] = Query(None, alias="fromDay", ge=1, le=31, description="First day to consider")
):
    """
    Get the bookable days of a month

    Days already gone are never offered: the current month starts today and
    past months come back empty.
    """
    # Validate month input
    if month < 1 or month > 12:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Month must be between 1 and 12"
        )

    start = first_bookable_day(year, month - 1, studio_today())
    if start is None:
        return []
    if from_day is not None:
        start = max(start, from_day)

    return await get_available_days(year, month - 1, start)

@router.get("/check", response_model=Dict[str, Any])
async def check_slot(
    date: str = Query(..., description="Date to check (YYYY-MM-DD)"),
    time: str = Query(..., description="Start time to check (HH:MM)"),
    service_id: str = Query(..., alias="serviceId"),
    exclude_id: Optional[str] = Query(None, alias="excludeId", description="Appointment being rescheduled")
):
    """
    Tell whether a date, time and service can still be booked
    """
    date_str = _canonical_date(date)
    time_str = _canonical_time(time)
    available = await is_available(date_str, time_str, service_id, exclude_appointment_id=exclude_id)
    return {"date": date_str, "time": time_str, "serviceId": service_id, "available": available}

@router.get("/times", response_model=List[str])
async def read_bookable_times(
    date: str = Query(..., description="Date to list start times for (YYYY-MM-DD)"),
    service_id: str = Query(..., alias="serviceId"),
    exclude_id: Optional[str] = Query(None, alias="excludeId", description="Appointment being rescheduled")
):
    """
    Get the start times still open on a date for a service
    """
    date_str = _canonical_date(date)
    return await get_bookable_times(date_str, service_id, exclude_appointment_id=exclude_id)
