from datetime import date, datetime, timedelta

import pytest
import pytz

from studio_booking.models.tables import Appointments, ScheduleRules
from studio_booking.services.slots.calculator import build_week_grid, compute_week_slots
from studio_booking.services.slots.config import StaffSchedule
from studio_booking.services.slots.timeutils import as_utc, local_to_utc

MONDAY = date(2024, 6, 3)


def utc(*args):
    return datetime(*args, tzinfo=pytz.UTC)


def rule(day, start, end, slot_type="AVAILABLE"):
    return ScheduleRules(staff_id=1, day_of_week=day, start_time=start, end_time=end, slot_type=slot_type)


def appt(start, end, status="CONFIRMED", id=1):
    return Appointments(id=id, staff_id=1, client_name="Bob", start_time=start, end_time=end, status=status)


def schedule(**overrides):
    values = dict(timezone="UTC", buffer_minutes=0, calendar_start_hour=8, calendar_end_hour=22)
    values.update(overrides)
    return StaffSchedule(**values)


def by_id(cells):
    return {c["cell_id"]: c["slot_type"] for c in cells}


@pytest.mark.parametrize("start_hour,end_hour", [(8, 22), (0, 24), (9, 10), (6, 18)])
def test_grid_cell_count(start_hour, end_hour):
    cells = build_week_grid(
        schedule(calendar_start_hour=start_hour, calendar_end_hour=end_hour), [], [], MONDAY
    )
    assert len(cells) == 7 * (end_hour - start_hour) * 4
    assert all(c["slot_type"] == "UNAVAILABLE" for c in cells)


def test_cells_are_ordered_by_day_hour_quarter():
    cells = build_week_grid(schedule(calendar_start_hour=9, calendar_end_hour=10), [], [], MONDAY)
    assert [c["cell_id"] for c in cells[:5]] == [
        "2024-06-03|9|0",
        "2024-06-03|9|1",
        "2024-06-03|9|2",
        "2024-06-03|9|3",
        "2024-06-04|9|0",
    ]
    assert cells[-1]["date"] == "2024-06-09"


def test_week_days_map_to_sunday_based_rules():
    rules = [rule(0, "09:00", "10:00"), rule(1, "09:00", "10:00", "PENDING_CONFIRM")]
    cells = by_id(build_week_grid(schedule(), rules, [], MONDAY))
    assert cells["2024-06-03|9|0"] == "PENDING_CONFIRM"  # Monday
    assert cells["2024-06-09|9|0"] == "AVAILABLE"  # Sunday
    assert cells["2024-06-04|9|0"] == "UNAVAILABLE"


def test_weekday_follows_offset_from_week_start():
    # First column is always treated as Monday
    rules = [rule(1, "09:00", "10:00")]
    cells = build_week_grid(
        schedule(calendar_start_hour=9, calendar_end_hour=10), rules, [], date(2024, 6, 5)
    )
    assert cells[0]["cell_id"] == "2024-06-05|9|0"
    assert cells[0]["slot_type"] == "AVAILABLE"
    assert cells[4]["slot_type"] == "UNAVAILABLE"


def test_appointment_marks_cells_booked():
    rules = [rule(1, "09:00", "17:00")]
    appointments = [appt(utc(2024, 6, 3, 10), utc(2024, 6, 3, 11))]
    cells = by_id(build_week_grid(schedule(), rules, appointments, MONDAY))

    assert cells["2024-06-03|9|3"] == "AVAILABLE"
    for quarter in range(4):
        assert cells[f"2024-06-03|10|{quarter}"] == "BOOKED"
    assert cells["2024-06-03|11|0"] == "AVAILABLE"


def test_buffer_extends_booked_cells():
    rules = [rule(1, "09:00", "17:00")]
    appointments = [appt(utc(2024, 6, 3, 10), utc(2024, 6, 3, 11))]
    cells = by_id(build_week_grid(schedule(buffer_minutes=15), rules, appointments, MONDAY))

    assert cells["2024-06-03|11|0"] == "BOOKED"
    assert cells["2024-06-03|11|1"] == "AVAILABLE"


def test_cancelled_appointments_are_ignored():
    rules = [rule(1, "09:00", "17:00")]
    appointments = [appt(utc(2024, 6, 3, 10), utc(2024, 6, 3, 11), status="CANCELLED")]
    cells = by_id(build_week_grid(schedule(), rules, appointments, MONDAY))
    assert cells["2024-06-03|10|0"] == "AVAILABLE"


def test_unavailable_cells_are_never_booked():
    appointments = [appt(utc(2024, 6, 3, 10), utc(2024, 6, 3, 11))]
    cells = by_id(build_week_grid(schedule(), [], appointments, MONDAY))
    assert cells["2024-06-03|10|0"] == "UNAVAILABLE"


def test_open_until_cuts_off_bookable_cells():
    rules = [rule(day, "09:00", "17:00") for day in range(7)]
    # Thursday 00:00 local in Shanghai
    cutoff = local_to_utc(date(2024, 6, 6), 0, "Asia/Shanghai")
    cells = by_id(build_week_grid(
        schedule(timezone="Asia/Shanghai", open_until=cutoff), rules, [], MONDAY
    ))

    assert cells["2024-06-05|16|3"] == "AVAILABLE"
    assert cells["2024-06-06|9|0"] == "UNAVAILABLE"
    assert cells["2024-06-09|12|0"] == "UNAVAILABLE"


def test_open_until_is_inclusive_at_cell_start():
    rules = [rule(1, "09:00", "17:00")]
    cutoff = utc(2024, 6, 3, 12)
    cells = by_id(build_week_grid(schedule(open_until=cutoff), rules, [], MONDAY))
    assert cells["2024-06-03|11|3"] == "AVAILABLE"
    assert cells["2024-06-03|12|0"] == "UNAVAILABLE"


def test_grid_uses_staff_timezone():
    rules = [rule(1, "09:00", "17:00")]
    # 09:00 in Shanghai
    appointments = [appt(utc(2024, 6, 3, 1), utc(2024, 6, 3, 2))]
    cells = by_id(build_week_grid(schedule(timezone="Asia/Shanghai"), rules, appointments, MONDAY))
    assert cells["2024-06-03|9|0"] == "BOOKED"
    assert cells["2024-06-03|9|3"] == "BOOKED"
    assert cells["2024-06-03|10|0"] == "AVAILABLE"


def test_grid_across_dst_change():
    # US DST starts Sunday 2024-03-10
    week = date(2024, 3, 4)
    rules = [rule(day, "08:00", "18:00") for day in range(7)]
    appointments = [
        appt(utc(2024, 3, 4, 14), utc(2024, 3, 4, 15), id=1),   # 09:00 EST
        appt(utc(2024, 3, 10, 13), utc(2024, 3, 10, 14), id=2),  # 09:00 EDT
    ]
    cells = by_id(build_week_grid(schedule(timezone="America/New_York"), rules, appointments, week))

    assert len(cells) == 7 * 14 * 4
    assert cells["2024-03-04|9|0"] == "BOOKED"
    assert cells["2024-03-04|8|3"] == "AVAILABLE"
    assert cells["2024-03-10|9|0"] == "BOOKED"
    assert cells["2024-03-10|8|3"] == "AVAILABLE"
    assert cells["2024-03-10|10|0"] == "AVAILABLE"


def test_booked_cells_match_buffered_overlap():
    sched = schedule(timezone="Europe/Berlin", buffer_minutes=30)
    rules = [rule(day, "08:00", "20:00") for day in range(7)]
    appointments = [
        appt(utc(2024, 6, 4, 8), utc(2024, 6, 4, 9, 15), id=1),
        appt(utc(2024, 6, 6, 14, 30), utc(2024, 6, 6, 15), id=2),
    ]
    cells = build_week_grid(sched, rules, appointments, MONDAY)

    for cell in cells:
        day = date.fromisoformat(cell["date"])
        start = local_to_utc(day, cell["hour"] * 60 + cell["quarter"] * 15, sched.timezone)
        end = start + timedelta(minutes=15)
        overlapped = any(
            start < as_utc(a.end_time) + timedelta(minutes=30) and end > as_utc(a.start_time)
            for a in appointments
        )
        if cell["slot_type"] == "BOOKED":
            assert overlapped
        elif cell["slot_type"] in ("AVAILABLE", "PENDING_CONFIRM"):
            assert not overlapped


def test_compute_week_slots_reads_snapshot(db, make_staff, add_appointment):
    staff, block = make_staff(rules=[(1, "09:00", "17:00", "AVAILABLE")])
    add_appointment(staff, block, utc(2024, 6, 3, 10), utc(2024, 6, 3, 11))
    add_appointment(staff, block, utc(2024, 6, 3, 13), utc(2024, 6, 3, 14), status="CANCELLED")
    # Outside the week
    add_appointment(staff, block, utc(2024, 6, 10, 10), utc(2024, 6, 10, 11))

    first = compute_week_slots(db, staff.id, MONDAY)
    second = compute_week_slots(db, staff.id, MONDAY)
    assert first == second

    cells = by_id(first)
    assert cells["2024-06-03|10|0"] == "BOOKED"
    assert cells["2024-06-03|13|0"] == "AVAILABLE"


def test_compute_week_slots_fills_missing_settings_with_defaults(db):
    cells = compute_week_slots(db, 999, MONDAY)
    # Default calendar 8-22
    assert len(cells) == 7 * 14 * 4
