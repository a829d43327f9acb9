from typing import Dict, Any, List, Optional
from studio.db.mongodb import db
from studio.db.appointments import find_appointment, find_appointments
from studio.core.availability import check_availability, holds_slot
from studio.schemas.appointment import (
    Appointment, AppointmentCreate, AppointmentReschedule, AppointmentStatus
)
from studio.services.availability_service import load_booking_context
from studio.services.client_service import ensure_client
from studio.utils.formatting import clean_phone
from datetime import datetime
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError, PyMongoError
import logging

logger = logging.getLogger(__name__)

class SlotUnavailableError(Exception):
    """The requested date, time and service are no longer free."""

    def __init__(self, date: str, time: str, service_id: str):
        self.date = date
        self.time = time
        self.service_id = service_id
        super().__init__(f"Slot {date} {time} for service {service_id} is no longer available")

async def _ensure_free(
    date_str: str,
    time: str,
    service_id: str,
    exclude_appointment_id: Optional[str] = None
) -> None:
    hours, blocks, appointments = await load_booking_context(date_str)
    if not check_availability(
        date_str, time, service_id, hours, blocks, appointments,
        exclude_appointment_id=exclude_appointment_id
    ):
        raise SlotUnavailableError(date_str, time, service_id)

async def create_appointment(appointment_in: AppointmentCreate, service: Dict[str, Any]) -> Appointment:
    """
    Book a service for a client.

    The availability check runs again here, right before the insert; the
    unique index on active slots catches a concurrent booking that slipped
    past it.

    Raises:
        SlotUnavailableError: the slot is closed, blocked or already taken
    """
    await _ensure_free(appointment_in.date, appointment_in.time, appointment_in.serviceId)

    status = AppointmentStatus.SCHEDULED
    appointment_data = {
        "serviceId": appointment_in.serviceId,
        "serviceName": service.get("name", "Serviço"),
        "clientName": appointment_in.clientName,
        "clientWhatsapp": appointment_in.clientWhatsapp,
        "price": float(service.get("price") or 0),
        "date": appointment_in.date,
        "time": appointment_in.time,
        "status": status.value,
        "holdsSlot": holds_slot(status),
        "createdAt": datetime.utcnow()
    }

    try:
        result = await db.db.appointments.insert_one(appointment_data)
    except DuplicateKeyError as e:
        logger.info(f"Concurrent booking detected for {appointment_in.date} {appointment_in.time}")
        raise SlotUnavailableError(appointment_in.date, appointment_in.time, appointment_in.serviceId) from e

    logger.info(f"Appointment {result.inserted_id} booked for {appointment_in.date} {appointment_in.time}")

    # First booking from this number registers the client
    try:
        await ensure_client(appointment_in.clientName, appointment_in.clientWhatsapp)
    except PyMongoError as e:
        logger.warning(f"Appointment {result.inserted_id} booked but client registration failed: {e}")

    return await find_appointment(str(result.inserted_id))

async def get_appointment_by_id(appointment_id: str) -> Optional[Appointment]:
    """
    Get an appointment by ID
    """
    return await find_appointment(appointment_id)

async def get_appointments(
    status: Optional[AppointmentStatus] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    skip: int = 0,
    limit: int = 100
) -> List[Appointment]:
    """
    Get appointments for the admin agenda
    """
    # Build query
    query: Dict[str, Any] = {}

    if status:
        query["status"] = status.value

    if start_date and end_date:
        query["date"] = {"$gte": start_date, "$lte": end_date}
    elif start_date:
        query["date"] = {"$gte": start_date}
    elif end_date:
        query["date"] = {"$lte": end_date}

    return await find_appointments(query, skip=skip, limit=limit)

async def get_client_appointments(whatsapp: str) -> List[Appointment]:
    """
    Get every appointment booked from a WhatsApp number
    """
    return await find_appointments({"clientWhatsapp": clean_phone(whatsapp)})

async def reschedule_appointment(
    appointment_id: str,
    reschedule: AppointmentReschedule
) -> Optional[Appointment]:
    """
    Move an appointment to a new date and time, keeping its ID

    Returns:
        Updated appointment or None if it is missing or no longer scheduled

    Raises:
        SlotUnavailableError: the new slot cannot be booked
    """
    appointment = await find_appointment(appointment_id)
    if not appointment:
        return None

    # Completed and cancelled appointments stay where they are
    if appointment.status != AppointmentStatus.SCHEDULED:
        return None

    await _ensure_free(
        reschedule.date, reschedule.time, appointment.serviceId,
        exclude_appointment_id=appointment_id
    )

    try:
        await db.db.appointments.update_one(
            {"_id": ObjectId(appointment_id)},
            {"$set": {
                "date": reschedule.date,
                "time": reschedule.time,
                "updatedAt": datetime.utcnow()
            }}
        )
    except DuplicateKeyError as e:
        raise SlotUnavailableError(reschedule.date, reschedule.time, appointment.serviceId) from e

    return await find_appointment(appointment_id)

async def set_appointment_status(
    appointment_id: str,
    new_status: AppointmentStatus
) -> Optional[Appointment]:
    """
    Change an appointment's status

    Reviving a cancelled appointment takes its slot back, so the slot is
    checked again first.

    Raises:
        SlotUnavailableError: a revived appointment's slot was taken meanwhile
    """
    appointment = await find_appointment(appointment_id)
    if not appointment:
        return None

    if appointment.status == new_status:
        return appointment

    if holds_slot(new_status) and not holds_slot(appointment.status):
        await _ensure_free(
            appointment.date, appointment.time, appointment.serviceId,
            exclude_appointment_id=appointment_id
        )

    try:
        await db.db.appointments.update_one(
            {"_id": ObjectId(appointment_id)},
            {"$set": {
                "status": new_status.value,
                "holdsSlot": holds_slot(new_status),
                "updatedAt": datetime.utcnow()
            }}
        )
    except DuplicateKeyError as e:
        raise SlotUnavailableError(appointment.date, appointment.time, appointment.serviceId) from e

    return await find_appointment(appointment_id)

async def cancel_appointment(appointment_id: str) -> Optional[Appointment]:
    """
    Cancel a scheduled appointment, releasing its slot
    """
    appointment = await find_appointment(appointment_id)
    if not appointment:
        return None

    if appointment.status != AppointmentStatus.SCHEDULED:
        return None

    return await set_appointment_status(appointment_id, AppointmentStatus.CANCELLED)

async def delete_appointment(appointment_id: str) -> bool:
    """
    Delete an appointment
    """
    try:
        object_id = ObjectId(appointment_id)
    except (InvalidId, TypeError):
        return False

    result = await db.db.appointments.delete_one({"_id": object_id})
    return result.deleted_count > 0
