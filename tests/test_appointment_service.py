from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from studio.schemas.appointment import (
    Appointment, AppointmentCreate, AppointmentReschedule, AppointmentStatus
)
from studio.schemas.hours import OperatingHours, TimeRange
from studio.services import appointment_service
from studio.services.appointment_service import (
    SlotUnavailableError,
    cancel_appointment,
    create_appointment,
    reschedule_appointment,
    set_appointment_status,
)

APPOINTMENT_ID = str(ObjectId())
SERVICE = {"id": "svc-1", "name": "Fio a Fio", "price": 130.0}

# Tuesday open 08:00-12:00 and 14:00-18:00
HOURS = [
    OperatingHours(dayOfWeek=2, isOpen=True, slots=[
        TimeRange(start="08:00", end="12:00"),
        TimeRange(start="14:00", end="18:00"),
    ])
]


def _booking(**overrides):
    data = {
        "serviceId": "svc-1",
        "clientName": "Maria Silva",
        "clientWhatsapp": "+55 11 98765-4321",
        "date": "2025-06-10",
        "time": "14:00",
    }
    data.update(overrides)
    return AppointmentCreate(**data)


def _existing(status=AppointmentStatus.SCHEDULED, appointment_id=APPOINTMENT_ID, time="14:00"):
    return Appointment(
        id=appointment_id, serviceId="svc-1", date="2025-06-10",
        time=time, status=status, price=130.0
    )


def _fake_db():
    fake = MagicMock()
    fake.db.appointments.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId(APPOINTMENT_ID)))
    fake.db.appointments.update_one = AsyncMock()
    return fake


@pytest.mark.asyncio
async def test_create_inserts_when_slot_is_free():
    fake_db = _fake_db()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], []))),
        patch.object(appointment_service, "find_appointment", AsyncMock(return_value=_existing())),
        patch.object(appointment_service, "ensure_client", AsyncMock()) as ensure_client,
    ):
        appointment = await create_appointment(_booking(), SERVICE)

    assert appointment.id == APPOINTMENT_ID
    inserted = fake_db.db.appointments.insert_one.await_args.args[0]
    assert inserted["status"] == "SCHEDULED"
    assert inserted["holdsSlot"] is True
    assert inserted["serviceName"] == "Fio a Fio"
    assert inserted["price"] == 130.0
    assert inserted["clientWhatsapp"] == "5511987654321"
    ensure_client.assert_awaited_once_with("Maria Silva", "5511987654321")


@pytest.mark.asyncio
async def test_create_rejects_taken_slot_without_writing():
    fake_db = _fake_db()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], [_existing()]))),
    ):
        with pytest.raises(SlotUnavailableError):
            await create_appointment(_booking(), SERVICE)

    fake_db.db.appointments.insert_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_rejects_time_outside_hours():
    fake_db = _fake_db()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], []))),
    ):
        with pytest.raises(SlotUnavailableError):
            await create_appointment(_booking(time="12:00"), SERVICE)

    fake_db.db.appointments.insert_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_concurrent_insert_surfaces_as_slot_unavailable():
    fake_db = _fake_db()
    fake_db.db.appointments.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], []))),
        patch.object(appointment_service, "ensure_client", AsyncMock()) as ensure_client,
    ):
        with pytest.raises(SlotUnavailableError) as excinfo:
            await create_appointment(_booking(), SERVICE)

    assert excinfo.value.date == "2025-06-10"
    assert excinfo.value.time == "14:00"
    ensure_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_reschedule_in_place_ignores_own_slot():
    fake_db = _fake_db()
    current = _existing(time="15:00")
    moved = _existing(time="15:00")
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], [current]))),
        patch.object(appointment_service, "find_appointment", AsyncMock(side_effect=[current, moved])),
    ):
        result = await reschedule_appointment(APPOINTMENT_ID, AppointmentReschedule(date="2025-06-10", time="15:00"))

    assert result.time == "15:00"
    update = fake_db.db.appointments.update_one.await_args.args[1]["$set"]
    assert update["date"] == "2025-06-10"
    assert update["time"] == "15:00"


@pytest.mark.asyncio
async def test_reschedule_to_taken_slot_fails():
    fake_db = _fake_db()
    current = _existing()
    other = _existing(appointment_id=str(ObjectId()), time="15:00")
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], [current, other]))),
        patch.object(appointment_service, "find_appointment", AsyncMock(return_value=current)),
    ):
        with pytest.raises(SlotUnavailableError):
            await reschedule_appointment(APPOINTMENT_ID, AppointmentReschedule(date="2025-06-10", time="15:00"))

    fake_db.db.appointments.update_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_reschedule_refuses_completed_appointment():
    fake_db = _fake_db()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "find_appointment", AsyncMock(return_value=_existing(AppointmentStatus.COMPLETED))),
    ):
        result = await reschedule_appointment(APPOINTMENT_ID, AppointmentReschedule(date="2025-06-10", time="15:00"))

    assert result is None
    fake_db.db.appointments.update_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_releases_slot():
    fake_db = _fake_db()
    cancelled = _existing(AppointmentStatus.CANCELLED)
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "find_appointment", AsyncMock(side_effect=[_existing(), _existing(), cancelled])),
    ):
        result = await cancel_appointment(APPOINTMENT_ID)

    assert result.status == AppointmentStatus.CANCELLED
    update = fake_db.db.appointments.update_one.await_args.args[1]["$set"]
    assert update["status"] == "CANCELLED"
    assert update["holdsSlot"] is False


@pytest.mark.asyncio
async def test_reviving_cancelled_appointment_checks_slot_again():
    fake_db = _fake_db()
    cancelled = _existing(AppointmentStatus.CANCELLED)
    taker = _existing(appointment_id=str(ObjectId()))
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], [cancelled, taker]))),
        patch.object(appointment_service, "find_appointment", AsyncMock(return_value=cancelled)),
    ):
        with pytest.raises(SlotUnavailableError):
            await set_appointment_status(APPOINTMENT_ID, AppointmentStatus.SCHEDULED)

    fake_db.db.appointments.update_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_completing_does_not_recheck_slot():
    fake_db = _fake_db()
    completed = _existing(AppointmentStatus.COMPLETED)
    load_context = AsyncMock()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", load_context),
        patch.object(appointment_service, "find_appointment", AsyncMock(side_effect=[_existing(), completed])),
    ):
        result = await set_appointment_status(APPOINTMENT_ID, AppointmentStatus.COMPLETED)

    assert result.status == AppointmentStatus.COMPLETED
    load_context.assert_not_awaited()
    update = fake_db.db.appointments.update_one.await_args.args[1]["$set"]
    assert update["holdsSlot"] is True


@pytest.mark.asyncio
async def test_booking_survives_client_registration_failure():
    fake_db = _fake_db()
    with (
        patch.object(appointment_service, "db", fake_db),
        patch.object(appointment_service, "load_booking_context", AsyncMock(return_value=(HOURS, [], []))),
        patch.object(appointment_service, "find_appointment", AsyncMock(return_value=_existing())),
        patch.object(appointment_service, "ensure_client",
                     AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key"))),
    ):
        appointment = await create_appointment(_booking(), SERVICE)

    assert appointment.id == APPOINTMENT_ID
    fake_db.db.appointments.insert_one.assert_awaited_once()
