# barbershop/availability.py
"""Bookable time slots and dates. compute_availability() and resolve_available_dates() are pure."""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlmodel import Session

from .bookings import booked_times as load_booked_times
from .config import Settings, get_settings
from .core import Interval, time_grid, to_minutes
from .data import CLOSED_WEEKDAYS
from .errors import NotFoundError, SlotUnavailableError, ValidationError
from .models import Barber, Branch, Leave, Shift
from .schemas import LeaveStatus, TimeSlot
from .scheduling import leave_interval, list_leaves, list_shifts, shift_interval

logger = logging.getLogger(__name__)


def local_now(now: datetime, settings: Settings) -> datetime:
    # naive datetimes are taken as already being shop-local wall-clock time
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(settings.timezone))


def slot_grid(settings: Settings) -> List[str]:
    return time_grid(settings.slot_start, settings.slot_end, settings.slot_minutes)


def _covered_by_shift(slot: int, shifts: List[Shift]) -> bool:
    for shift in shifts:
        if not shift_interval(shift).contains(slot):
            continue
        if not any(Interval.from_hhmm(b.start_time, b.end_time).contains(slot) for b in shift.breaks):
            return True
    return False


def _on_leave(slot: int, leaves: List[Leave]) -> bool:
    for leave in leaves:
        interval = leave_interval(leave)
        if interval is None or interval.contains(slot):
            return True
    return False


def compute_availability(
    target_date: date,
    barber_id: str,
    branch_id: str,
    now: datetime,
    *,
    shifts: Iterable[Shift] = (),
    leaves: Iterable[Leave] = (),
    booked_times: Iterable[str] = (),
    settings: Optional[Settings] = None,
) -> List[TimeSlot]:
    settings = settings or get_settings()

    # 1) Where does "now" fall in shop time
    current = local_now(now, settings)
    today = current.date()
    now_minutes = current.hour * 60 + current.minute

    no_preference = barber_id == settings.no_preference_id

    # 2) Only this barber's shifts at this branch and approved leaves count
    day_shifts = [
        s for s in shifts
        if s.date == target_date and s.barber_id == barber_id and s.branch_id == branch_id
    ]
    day_leaves = [
        leave for leave in leaves
        if leave.date == target_date and leave.barber_id == barber_id
        and leave.status == LeaveStatus.approved.value
    ]
    taken = set(booked_times)

    slots = []
    for time_str in slot_grid(settings):
        minute = to_minutes(time_str)

        if target_date < today:
            on_time = False
        elif target_date == today:
            on_time = minute > now_minutes
        else:
            on_time = True

        if no_preference:
            available = on_time
        else:
            available = (
                on_time
                and _covered_by_shift(minute, day_shifts)
                and not _on_leave(minute, day_leaves)
                and time_str not in taken
            )
        slots.append(TimeSlot(time=time_str, available=available))

    return slots


def get_time_slots(
    session: Session,
    target_date: date,
    barber_id: str,
    branch_id: str,
    now: datetime,
    settings: Optional[Settings] = None,
) -> List[TimeSlot]:
    settings = settings or get_settings()

    if barber_id == settings.no_preference_id:
        return compute_availability(target_date, barber_id, branch_id, now, settings=settings)

    shifts = list_shifts(
        session, branch_id=branch_id, barber_id=barber_id, start=target_date, end=target_date
    )
    leaves = list_leaves(
        session, barber_id=barber_id, status=LeaveStatus.approved,
        start=target_date, end=target_date,
    )
    taken = load_booked_times(session, barber_id, branch_id, target_date)

    slots = compute_availability(
        target_date, barber_id, branch_id, now,
        shifts=shifts, leaves=leaves, booked_times=taken, settings=settings,
    )
    logger.debug(
        "Availability for barber %s at branch %s on %s: %d of %d slots open",
        barber_id, branch_id, target_date, sum(s.available for s in slots), len(slots),
    )
    return slots


def resolve_available_dates(
    shift_dates: Iterable[date],
    leave_dates: Iterable[date],
    today: date,
) -> List[date]:
    on_leave = {d for d in leave_dates if d >= today}
    working = {d for d in shift_dates if d >= today}
    dates = sorted(working - on_leave)
    # re-check the lower bound in case a caller's "today" came from another timezone
    return [d for d in dates if d >= today]


def get_available_dates(
    session: Session,
    barber_id: str,
    branch_id: str,
    today: date,
) -> List[date]:
    shifts = list_shifts(session, branch_id=branch_id, barber_id=barber_id, start=today)
    leaves = list_leaves(session, barber_id=barber_id, status=LeaveStatus.approved, start=today)

    dates = resolve_available_dates(
        (s.date for s in shifts), (leave.date for leave in leaves), today
    )
    logger.debug(
        "Barber %s at branch %s: %d shift days, %d leave days, %d bookable",
        barber_id, branch_id, len(shifts), len(leaves), len(dates),
    )
    return dates


def open_days(today: date, settings: Optional[Settings] = None) -> List[date]:
    """Shop-wide bookable days, used when the customer has no barber preference."""
    settings = settings or get_settings()
    days = []
    for offset in range(settings.booking_horizon_days):
        day = today + timedelta(days=offset)
        if day.weekday() not in CLOSED_WEEKDAYS:
            days.append(day)
    return days


def check_booking_target(
    session: Session,
    barber_id: str,
    branch_id: str,
    time_str: str,
    settings: Optional[Settings] = None,
) -> None:
    """Raise unless an appointment may be stored against this barber, branch and time."""
    settings = settings or get_settings()

    # 1) A concrete barber has to be picked before a booking is stored
    if barber_id == settings.no_preference_id:
        raise ValidationError("Please choose a barber before booking")

    # 2) Barber and branch must exist
    if session.get(Branch, branch_id) is None:
        raise NotFoundError("Branch not found")
    if session.get(Barber, barber_id) is None:
        raise NotFoundError("Barber not found")

    # 3) The time has to be one of the grid slots
    if time_str not in slot_grid(settings):
        raise ValidationError(
            f"Appointment time must be between {settings.slot_start} and {settings.slot_end} "
            f"in {settings.slot_minutes}-minute increments"
        )


def ensure_bookable(
    session: Session,
    target_date: date,
    time_str: str,
    barber_id: str,
    branch_id: str,
    now: datetime,
    settings: Optional[Settings] = None,
) -> None:
    """Raise unless ``time_str`` is an open slot for this barber right now."""
    settings = settings or get_settings()
    check_booking_target(session, barber_id, branch_id, time_str, settings)

    # 4) And that slot has to be open
    for slot in get_time_slots(session, target_date, barber_id, branch_id, now, settings):
        if slot.time == time_str and slot.available:
            return
    logger.warning(
        "Rejected booking for barber %s at branch %s on %s %s: slot not available",
        barber_id, branch_id, target_date, time_str,
    )
    raise SlotUnavailableError("This time slot is not available. Please select a different time.")
