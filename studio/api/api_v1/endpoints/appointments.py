from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional, Dict, Any
from studio.core.auth import get_current_admin
from studio.schemas.appointment import (
    Appointment, AppointmentCreate, AppointmentReschedule,
    AppointmentStatus, AppointmentStatusUpdate
)
from studio.services.appointment_service import (
    SlotUnavailableError, create_appointment, get_appointment_by_id,
    get_appointments, get_client_appointments, reschedule_appointment,
    set_appointment_status, cancel_appointment, delete_appointment
)
from studio.services.catalog_service import get_service_by_id
from studio.utils.dates import normalize_date

router = APIRouter()

SLOT_UNAVAILABLE_DETAIL = "Slot no longer available"

def _slot_conflict(error: SlotUnavailableError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": SLOT_UNAVAILABLE_DETAIL,
            "date": error.date,
            "time": error.time,
            "serviceId": error.service_id
        }
    )

def _date_param(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return normalize_date(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid date format. Use YYYY-MM-DD"
        )

async def _get_or_404(appointment_id: str) -> Appointment:
    appointment = await get_appointment_by_id(appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return appointment

@router.post("/", response_model=Appointment, status_code=status.HTTP_201_CREATED)
async def book_appointment(appointment_in: AppointmentCreate):
    """
    Request an appointment as a client

    Answers 409 when the slot was taken or closed since it was offered, so
    the client can pick another time.
    """
    # Check if service exists
    service = await get_service_by_id(appointment_in.serviceId)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )

    try:
        return await create_appointment(appointment_in, service)
    except SlotUnavailableError as e:
        raise _slot_conflict(e)

@router.get("/mine", response_model=List[Appointment])
async def read_my_appointments(
    whatsapp: str = Query(..., min_length=1, description="WhatsApp number used when booking")
):
    """
    Get a client's booking history by WhatsApp number
    """
    return await get_client_appointments(whatsapp)

@router.get("/", response_model=List[Appointment])
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_admin: dict = Depends(get_current_admin)
):
    """
    Get the agenda (admin only)
    """
    return await get_appointments(
        status=status_filter,
        start_date=_date_param(start_date),
        end_date=_date_param(end_date),
        skip=skip,
        limit=limit
    )

@router.get("/{appointment_id}", response_model=Appointment)
async def read_appointment(
    appointment_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Get appointment details (admin only)
    """
    return await _get_or_404(appointment_id)

@router.put("/{appointment_id}/status", response_model=Appointment)
async def update_appointment_status(
    appointment_id: str,
    status_update: AppointmentStatusUpdate,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Mark an appointment as scheduled, completed or cancelled (admin only)
    """
    await _get_or_404(appointment_id)

    try:
        updated = await set_appointment_status(appointment_id, status_update.status)
    except SlotUnavailableError as e:
        raise _slot_conflict(e)

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not update appointment status"
        )
    return updated

@router.post("/{appointment_id}/reschedule", response_model=Appointment)
async def reschedule(
    appointment_id: str,
    reschedule_in: AppointmentReschedule,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Move a scheduled appointment to another date and time (admin only)
    """
    await _get_or_404(appointment_id)

    try:
        updated = await reschedule_appointment(appointment_id, reschedule_in)
    except SlotUnavailableError as e:
        raise _slot_conflict(e)

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only scheduled appointments can be rescheduled"
        )
    return updated

@router.post("/{appointment_id}/cancel", response_model=Appointment)
async def cancel(
    appointment_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Cancel a scheduled appointment (admin only)
    """
    await _get_or_404(appointment_id)

    cancelled = await cancel_appointment(appointment_id)
    if not cancelled:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only scheduled appointments can be cancelled"
        )
    return cancelled

@router.delete("/{appointment_id}", response_model=Dict[str, Any])
async def remove_appointment(
    appointment_id: str,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Delete an appointment permanently (admin only)
    """
    success = await delete_appointment(appointment_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return {"message": "Appointment deleted successfully"}
