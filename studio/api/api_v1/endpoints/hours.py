from fastapi import APIRouter, Depends
from typing import List
from studio.core.auth import get_current_admin
from studio.schemas.hours import OperatingHours, OperatingHoursUpdate
from studio.services.schedule_service import get_operating_hours, update_operating_hours

router = APIRouter()

@router.get("/", response_model=List[OperatingHours])
async def read_operating_hours():
    """
    Get the studio's weekly operating hours (0 = Sunday)
    """
    return await get_operating_hours()

@router.put("/", response_model=List[OperatingHours])
async def replace_operating_hours(
    hours_update: OperatingHoursUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Update operating hours for one or more weekdays (admin only)
    """
    return await update_operating_hours(hours_update.hours)
