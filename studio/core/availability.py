"""
Booking eligibility rules for the studio calendar.

Pure functions over data already loaded from the store: business hours,
agenda blocks and existing appointments. Nothing here performs I/O or
keeps state, so callers re-run them whenever any input changes.

All dates are "YYYY-MM-DD" and all times "HH:MM", zero-padded. Range checks
compare these strings lexicographically, which only holds for the padded
form; normalize at the boundary (see studio.utils.dates).
"""
from calendar import monthrange
from datetime import date
from typing import Iterable, List, Optional, Sequence

from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.schemas.block import AgendaBlock
from studio.schemas.hours import OperatingHours
from studio.utils.dates import minutes_to_time, parse_date, time_to_minutes, weekday_of


def holds_slot(status: AppointmentStatus) -> bool:
    """Whether an appointment in this status occupies its (date, time, service)."""
    if status == AppointmentStatus.SCHEDULED:
        return True
    if status == AppointmentStatus.COMPLETED:
        return True
    if status == AppointmentStatus.CANCELLED:
        return False
    raise ValueError(f"Unknown appointment status: {status!r}")


def _hours_for(weekday: int, hours: Iterable[OperatingHours]) -> Optional[OperatingHours]:
    for entry in hours:
        if entry.dayOfWeek == weekday:
            return entry
    return None


def is_date_blocked(date_str: str, blocks: Iterable[AgendaBlock]) -> bool:
    """True if date_str falls inside any block, both ends inclusive."""
    return any(block.startDate <= date_str <= block.endDate for block in blocks)


def compute_available_days(
    year: int,
    month_index: int,
    from_day: int,
    hours: Sequence[OperatingHours],
    blocks: Sequence[AgendaBlock]
) -> List[int]:
    """
    Days of the month (1-based) on which the studio takes bookings.

    Args:
        year: Calendar year
        month_index: Zero-based month (0 = January)
        from_day: First day to consider, normally today
        hours: Weekly operating hours, one entry per weekday
        blocks: Agenda blocks

    Returns:
        Ascending day numbers; closed weekdays and blocked dates are left out
    """
    if not 0 <= month_index <= 11:
        return []

    _, num_days = monthrange(year, month_index + 1)

    available_days = []
    for day in range(max(from_day, 1), num_days + 1):
        current = date(year, month_index + 1, day)

        day_hours = _hours_for(weekday_of(current), hours)
        if day_hours is None or not day_hours.isOpen:
            continue

        if is_date_blocked(current.isoformat(), blocks):
            continue

        available_days.append(day)

    return available_days


def is_slot_bookable(date_str: str, time: str, hours: Sequence[OperatingHours]) -> bool:
    """True if time lies in [start, end) of some slot on date_str's weekday."""
    try:
        weekday = weekday_of(parse_date(date_str))
    except ValueError:
        return False

    day_hours = _hours_for(weekday, hours)
    if day_hours is None or not day_hours.isOpen:
        return False

    # An open day without slots has nothing bookable yet
    return any(slot.start <= time < slot.end for slot in day_hours.slots)


def check_availability(
    date_str: str,
    time: str,
    service_id: str,
    hours: Sequence[OperatingHours],
    blocks: Sequence[AgendaBlock],
    appointments: Iterable[Appointment],
    exclude_appointment_id: Optional[str] = None
) -> bool:
    """
    Final gate before an appointment is written.

    Checks, in order: the time is inside business hours, the date is not
    blocked, and no other active appointment holds the same date, time and
    service. Pass exclude_appointment_id when moving an existing appointment
    so it does not collide with itself.
    """
    if not is_slot_bookable(date_str, time, hours):
        return False

    if is_date_blocked(date_str, blocks):
        return False

    return not any(
        appointment.date == date_str
        and appointment.time == time
        and appointment.serviceId == service_id
        and holds_slot(appointment.status)
        and appointment.id != exclude_appointment_id
        for appointment in appointments
    )


def list_bookable_times(
    date_str: str,
    service_id: str,
    hours: Sequence[OperatingHours],
    blocks: Sequence[AgendaBlock],
    appointments: Sequence[Appointment],
    step_minutes: int = 30,
    exclude_appointment_id: Optional[str] = None
) -> List[str]:
    """
    Start times a client may pick on date_str for the given service.

    Candidates are generated from each slot's start in step_minutes
    increments (end excluded) and then filtered through check_availability.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")

    try:
        weekday = weekday_of(parse_date(date_str))
    except ValueError:
        return []

    day_hours = _hours_for(weekday, hours)
    if day_hours is None or not day_hours.isOpen:
        return []

    candidates = set()
    for slot in day_hours.slots:
        start = time_to_minutes(slot.start)
        end = time_to_minutes(slot.end)
        for minute in range(start, end, step_minutes):
            candidates.add(minutes_to_time(minute))

    return [
        candidate for candidate in sorted(candidates)
        if check_availability(
            date_str, candidate, service_id, hours, blocks, appointments,
            exclude_appointment_id=exclude_appointment_id
        )
    ]
