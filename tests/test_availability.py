from datetime import date, timedelta

import pytest

from studio.core.availability import (
    check_availability,
    compute_available_days,
    holds_slot,
    is_date_blocked,
    is_slot_bookable,
    list_bookable_times,
)
from studio.schemas.appointment import Appointment, AppointmentStatus
from studio.schemas.block import AgendaBlock
from studio.schemas.hours import OperatingHours, TimeRange

SPLIT_DAY = [TimeRange(start="08:00", end="12:00"), TimeRange(start="14:00", end="18:00")]


def _hours(*open_days, slots=None):
    """Open the given weekdays (0 = Sunday) with the split-day slots; Sunday closed."""
    entries = [OperatingHours(dayOfWeek=0, isOpen=False, slots=[])]
    for day in open_days:
        entries.append(OperatingHours(dayOfWeek=day, isOpen=True, slots=SPLIT_DAY if slots is None else slots))
    return entries


def _block(start, end, block_id="blk-1"):
    return AgendaBlock(id=block_id, startDate=start, endDate=end, reason="Férias")


def _appointment(appointment_id="apt-1", date_str="2025-06-10", time="14:00",
                 service_id="svc-1", status=AppointmentStatus.SCHEDULED):
    return Appointment(id=appointment_id, serviceId=service_id, date=date_str, time=time, status=status)


# compute_available_days

def test_blocked_open_monday_is_excluded_and_next_monday_included():
    hours = _hours(1)
    blocks = [_block("2025-06-16", "2025-06-16")]

    days = compute_available_days(2025, 5, 16, hours, blocks)

    assert 16 not in days
    assert 23 in days
    assert days == [23, 30]


def test_closed_weekdays_never_appear():
    hours = _hours(1, 2, 3, 4, 5)

    days = compute_available_days(2025, 5, 1, hours, [])

    for day in days:
        weekday = date(2025, 6, day).isoweekday() % 7
        assert weekday not in (0, 6)
    # June 2025 has 21 weekdays
    assert len(days) == 21


def test_weekday_without_hours_entry_is_closed():
    # Saturday (6) has no entry at all
    hours = _hours(1)

    days = compute_available_days(2025, 5, 1, hours, [])

    assert 7 not in days
    assert days == [2, 9, 16, 23, 30]


def test_multi_day_block_excludes_every_date_inside_it():
    hours = _hours(1, 2, 3, 4, 5, 6)
    blocks = [_block("2025-06-09", "2025-06-14")]

    days = compute_available_days(2025, 5, 1, hours, blocks)

    assert not set(range(9, 15)) & set(days)
    assert 7 in days
    assert 16 in days


def test_block_crossing_month_boundary():
    hours = _hours(1, 2, 3, 4, 5, 6)
    blocks = [_block("2025-05-28", "2025-06-03")]

    days = compute_available_days(2025, 5, 1, hours, blocks)

    assert days[0] == 4


def test_days_start_at_from_day_and_stay_ascending():
    hours = _hours(1, 2, 3, 4, 5, 6)

    days = compute_available_days(2025, 5, 20, hours, [])

    assert days == sorted(days)
    assert min(days) == 20
    assert max(days) == 30


def test_from_day_past_month_end_gives_nothing():
    assert compute_available_days(2025, 1, 30, _hours(1, 2, 3, 4, 5, 6), []) == []


def test_open_day_with_empty_slots_still_counts_as_open_day():
    hours = _hours(1, slots=[])

    assert compute_available_days(2025, 5, 1, hours, []) == [2, 9, 16, 23, 30]


@pytest.mark.parametrize("month_index", [-1, 12])
def test_month_outside_calendar_gives_nothing(month_index):
    assert compute_available_days(2025, month_index, 1, _hours(1, 2, 3, 4, 5, 6), []) == []


def test_leap_february():
    hours = [OperatingHours(dayOfWeek=d, isOpen=True, slots=SPLIT_DAY) for d in range(7)]

    days = compute_available_days(2024, 1, 1, hours, [])

    assert days[-1] == 29


# is_date_blocked

@pytest.mark.parametrize("date_str,expected", [
    ("2025-06-09", False),
    ("2025-06-10", True),
    ("2025-06-12", True),
    ("2025-06-15", True),
    ("2025-06-16", False),
])
def test_block_range_is_inclusive(date_str, expected):
    blocks = [_block("2025-06-10", "2025-06-15")]
    assert is_date_blocked(date_str, blocks) is expected


def test_no_blocks_means_nothing_blocked():
    assert is_date_blocked("2025-06-10", []) is False


# is_slot_bookable

def test_slot_start_is_bookable_and_end_is_not():
    hours = _hours(1)

    assert is_slot_bookable("2025-06-16", "08:00", hours) is True
    assert is_slot_bookable("2025-06-16", "11:59", hours) is True
    assert is_slot_bookable("2025-06-16", "12:00", hours) is False
    assert is_slot_bookable("2025-06-16", "14:00", hours) is True
    assert is_slot_bookable("2025-06-16", "18:00", hours) is False


def test_lunch_gap_is_not_bookable():
    assert is_slot_bookable("2025-06-16", "13:00", _hours(1)) is False


def test_closed_or_missing_weekday_is_not_bookable():
    hours = _hours(1)

    # Sunday, explicitly closed
    assert is_slot_bookable("2025-06-15", "09:00", hours) is False
    # Tuesday, no entry
    assert is_slot_bookable("2025-06-17", "09:00", hours) is False


def test_open_day_without_slots_has_no_bookable_time():
    assert is_slot_bookable("2025-06-16", "09:00", _hours(1, slots=[])) is False


def test_overlapping_slots_act_as_union():
    slots = [TimeRange(start="09:00", end="12:00"), TimeRange(start="11:00", end="13:00")]
    hours = _hours(1, slots=slots)

    assert is_slot_bookable("2025-06-16", "11:30", hours) is True
    assert is_slot_bookable("2025-06-16", "12:30", hours) is True
    assert is_slot_bookable("2025-06-16", "13:00", hours) is False


def test_unparseable_date_is_quietly_rejected():
    assert is_slot_bookable("not-a-date", "09:00", _hours(1)) is False


# check_availability

def test_existing_appointment_blocks_same_triple():
    hours = _hours(1, 2)
    appointments = [_appointment()]

    assert check_availability("2025-06-10", "14:00", "svc-1", hours, [], appointments) is False


def test_excluding_own_id_allows_reschedule_in_place():
    hours = _hours(1, 2)
    appointments = [_appointment()]

    assert check_availability(
        "2025-06-10", "14:00", "svc-1", hours, [], appointments,
        exclude_appointment_id="apt-1"
    ) is True


def test_cancelled_appointment_does_not_block():
    hours = _hours(1, 2)
    appointments = [_appointment(status=AppointmentStatus.CANCELLED)]

    assert check_availability("2025-06-10", "14:00", "svc-1", hours, [], appointments) is True


def test_completed_appointment_still_blocks():
    hours = _hours(1, 2)
    appointments = [_appointment(status=AppointmentStatus.COMPLETED)]

    assert check_availability("2025-06-10", "14:00", "svc-1", hours, [], appointments) is False


def test_other_service_or_time_does_not_collide():
    hours = _hours(1, 2)
    appointments = [_appointment()]

    assert check_availability("2025-06-10", "14:00", "svc-2", hours, [], appointments) is True
    assert check_availability("2025-06-10", "14:30", "svc-1", hours, [], appointments) is True
    assert check_availability("2025-06-17", "14:00", "svc-1", hours, [], appointments) is True


def test_time_equal_to_slot_end_is_rejected():
    assert check_availability("2025-06-10", "18:00", "svc-1", _hours(2), [], []) is False
    assert check_availability("2025-06-10", "12:00", "svc-1", _hours(2), [], []) is False


def test_blocked_date_is_rejected_even_inside_hours():
    blocks = [_block("2025-06-10", "2025-06-10")]

    assert check_availability("2025-06-10", "09:00", "svc-1", _hours(2), blocks, []) is False


def test_exclusion_only_skips_the_named_appointment():
    hours = _hours(2)
    appointments = [_appointment(), _appointment(appointment_id="apt-2")]

    assert check_availability(
        "2025-06-10", "14:00", "svc-1", hours, [], appointments,
        exclude_appointment_id="apt-1"
    ) is False


# holds_slot

def test_every_status_has_a_slot_rule():
    assert holds_slot(AppointmentStatus.SCHEDULED) is True
    assert holds_slot(AppointmentStatus.COMPLETED) is True
    assert holds_slot(AppointmentStatus.CANCELLED) is False


# list_bookable_times

def test_bookable_times_follow_slots_and_skip_taken_ones():
    hours = _hours(2, slots=[TimeRange(start="09:00", end="11:00"), TimeRange(start="14:00", end="15:00")])
    appointments = [_appointment(time="09:30"), _appointment(appointment_id="apt-2", time="14:00", status=AppointmentStatus.CANCELLED)]

    times = list_bookable_times("2025-06-10", "svc-1", hours, [], appointments, step_minutes=30)

    assert times == ["09:00", "10:00", "10:30", "14:00", "14:30"]


def test_bookable_times_empty_on_blocked_or_closed_day():
    blocks = [_block("2025-06-10", "2025-06-10")]

    assert list_bookable_times("2025-06-10", "svc-1", _hours(2), blocks, [], step_minutes=60) == []
    assert list_bookable_times("2025-06-15", "svc-1", _hours(2), [], [], step_minutes=60) == []


def test_bookable_times_merge_overlapping_slots():
    slots = [TimeRange(start="09:00", end="10:00"), TimeRange(start="09:30", end="10:30")]

    times = list_bookable_times("2025-06-16", "svc-1", _hours(1, slots=slots), [], [], step_minutes=30)

    assert times == ["09:00", "09:30", "10:00"]


def test_bookable_times_reject_non_positive_step():
    with pytest.raises(ValueError):
        list_bookable_times("2025-06-16", "svc-1", _hours(1), [], [], step_minutes=0)


def test_every_offered_day_has_a_bookable_time_when_slots_exist():
    hours = _hours(1, 2, 3, 4, 5)
    blocks = [_block("2025-06-18", "2025-06-20")]

    for day in compute_available_days(2025, 5, 1, hours, blocks):
        date_str = (date(2025, 6, 1) + timedelta(days=day - 1)).isoformat()
        assert list_bookable_times(date_str, "svc-1", hours, blocks, [], step_minutes=60)
