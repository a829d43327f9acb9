from typing import List, Optional, Tuple
from datetime import date
from studio.core.availability import (
    check_availability, compute_available_days, list_bookable_times
)
from studio.core.config import settings
from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.schemas.block import AgendaBlock
from studio.schemas.hours import OperatingHours
from studio.services.schedule_service import get_operating_hours, get_blocks
from studio.db.appointments import find_appointments

def first_bookable_day(year: int, month_index: int, today: date) -> Optional[int]:
    """
    Where a month's calendar starts: today for the current month, the 1st
    for future months, None for months already over
    """
    if (year, month_index + 1) < (today.year, today.month):
        return None
    if (year, month_index + 1) == (today.year, today.month):
        return today.day
    return 1

async def get_day_appointments(date_str: str) -> List[Appointment]:
    """
    Get the appointments on a date that may still hold a slot
    """
    return await find_appointments({
        "date": date_str,
        "status": {"$ne": AppointmentStatus.CANCELLED.value}
    })

async def load_booking_context(
    date_str: str
) -> Tuple[List[OperatingHours], List[AgendaBlock], List[Appointment]]:
    """
    Fetch everything check_availability needs for one date
    """
    hours = await get_operating_hours()
    blocks = await get_blocks()
    appointments = await get_day_appointments(date_str)
    return hours, blocks, appointments

async def get_available_days(year: int, month_index: int, from_day: int) -> List[int]:
    """
    Get the bookable days of a month, starting at from_day
    """
    hours = await get_operating_hours()
    blocks = await get_blocks()
    return compute_available_days(year, month_index, from_day, hours, blocks)

async def is_available(
    date_str: str,
    time: str,
    service_id: str,
    exclude_appointment_id: Optional[str] = None
) -> bool:
    """
    Check a (date, time, service) triple against the current store contents
    """
    hours, blocks, appointments = await load_booking_context(date_str)
    return check_availability(
        date_str, time, service_id, hours, blocks, appointments,
        exclude_appointment_id=exclude_appointment_id
    )

async def get_bookable_times(
    date_str: str,
    service_id: str,
    exclude_appointment_id: Optional[str] = None
) -> List[str]:
    """
    Get the start times still open on a date for a service
    """
    hours, blocks, appointments = await load_booking_context(date_str)
    return list_bookable_times(
        date_str, service_id, hours, blocks, appointments,
        step_minutes=settings.SLOT_STEP_MINUTES,
        exclude_appointment_id=exclude_appointment_id
    )
