# barbershop/scheduling.py
"""Shift, leave and shift-template stores used by the admin planner."""

import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlmodel import Session, select

from .core import Interval
from .data import DEFAULT_SHIFT_TEMPLATES
from .db import reading, write_transaction
from .errors import NotFoundError, OverlapError, ValidationError
from .models import Barber, Branch, Leave, Shift, ShiftBreak, ShiftTemplate, utcnow
from .schemas import (
    BreakSchema, LeaveCreate, LeaveStatus, ShiftCreate, ShiftUpdate, TemplateUpsert,
)

logger = logging.getLogger(__name__)


def shift_interval(shift: Shift) -> Interval:
    return Interval.from_hhmm(shift.start_time, shift.end_time)


def leave_interval(leave: Leave) -> Optional[Interval]:
    # None = full-day leave
    if leave.start_time is None or leave.end_time is None:
        return None
    return Interval.from_hhmm(leave.start_time, leave.end_time)


def _build_breaks(breaks: Iterable[BreakSchema]) -> List[ShiftBreak]:
    built = []
    for b in breaks:
        Interval.from_hhmm(b.start_time, b.end_time)
        built.append(ShiftBreak(start_time=b.start_time, end_time=b.end_time))
    return built


def _lock_barber(session: Session, barber_id: str, required: bool = True) -> Optional[Barber]:
    # held until commit so concurrent shift writes for one barber run one at a time
    barber = session.exec(
        select(Barber).where(Barber.id == barber_id).with_for_update()
    ).first()
    if barber is None and required:
        raise NotFoundError("Barber not found")
    return barber


def _find_overlap(
    session: Session,
    barber_id: str,
    day: date,
    interval: Interval,
    exclude_id: Optional[str] = None,
) -> Optional[Shift]:
    siblings = session.exec(
        select(Shift)
        .where(Shift.barber_id == barber_id)
        .where(Shift.date == day)
    ).all()
    for s in siblings:
        if s.id == exclude_id:
            continue
        if interval.overlaps(shift_interval(s)):
            return s
    return None


# Shifts

def list_shifts(
    session: Session,
    branch_id: Optional[str] = None,
    barber_id: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Shift]:
    stmt = select(Shift)
    if branch_id:
        stmt = stmt.where(Shift.branch_id == branch_id)
    if barber_id:
        stmt = stmt.where(Shift.barber_id == barber_id)
    if start is not None:
        stmt = stmt.where(Shift.date >= start)
    if end is not None:
        stmt = stmt.where(Shift.date <= end)
    stmt = stmt.order_by(Shift.date, Shift.start_time)

    with reading("load shifts"):
        return list(session.exec(stmt).all())


def create_shift(session: Session, candidate: ShiftCreate) -> Shift:
    # 1) Validate shift and break intervals
    interval = Interval.from_hhmm(candidate.start_time, candidate.end_time)
    breaks = _build_breaks(candidate.breaks)

    with write_transaction(session, "create shift"):
        # 2) Both ends of the shift must exist
        _lock_barber(session, candidate.barber_id)
        if session.get(Branch, candidate.branch_id) is None:
            raise NotFoundError("Branch not found")

        # 3) Reject overlaps with the barber's other shifts that day
        conflict = _find_overlap(session, candidate.barber_id, candidate.date, interval)
        if conflict is not None:
            logger.warning(
                "Shift %s for barber %s on %s overlaps shift %s",
                interval, candidate.barber_id, candidate.date, conflict.id,
            )
            raise OverlapError("Overlaps with an existing shift")

        shift = Shift(
            barber_id=candidate.barber_id,
            branch_id=candidate.branch_id,
            date=candidate.date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            type=candidate.type.value,
            breaks=breaks,
        )
        session.add(shift)

    session.refresh(shift)
    logger.info(
        "Created shift %s for barber %s at branch %s on %s (%s)",
        shift.id, shift.barber_id, shift.branch_id, shift.date, interval,
    )
    return shift


def update_shift(session: Session, shift_id: str, changes: ShiftUpdate) -> Shift:
    with write_transaction(session, "update shift"):
        shift = session.get(Shift, shift_id)
        if shift is None:
            raise NotFoundError("Shift not found")

        # 1) Resolve the effective interval
        start_time = changes.start_time or shift.start_time
        end_time = changes.end_time or shift.end_time
        interval = Interval.from_hhmm(start_time, end_time)
        breaks = _build_breaks(changes.breaks) if changes.breaks is not None else None

        # 2) Re-check overlaps, ignoring the shift itself
        _lock_barber(session, shift.barber_id, required=False)
        conflict = _find_overlap(session, shift.barber_id, shift.date, interval, exclude_id=shift.id)
        if conflict is not None:
            logger.warning(
                "Update of shift %s to %s overlaps shift %s", shift.id, interval, conflict.id
            )
            raise OverlapError("Overlaps with an existing shift")

        shift.start_time = start_time
        shift.end_time = end_time
        if changes.type is not None:
            shift.type = changes.type.value
        if breaks is not None:
            shift.breaks = breaks
        shift.updated_at = utcnow()
        session.add(shift)

    session.refresh(shift)
    logger.info("Updated shift %s (%s)", shift.id, interval)
    return shift


def delete_shift(session: Session, shift_id: str) -> None:
    with write_transaction(session, "delete shift"):
        shift = session.get(Shift, shift_id)
        if shift is None:
            raise NotFoundError("Shift not found")
        session.delete(shift)
    logger.info("Deleted shift %s", shift_id)


# Leaves

def list_leaves(
    session: Session,
    barber_id: Optional[str] = None,
    status: Optional[LeaveStatus] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Leave]:
    stmt = select(Leave)
    if barber_id:
        stmt = stmt.where(Leave.barber_id == barber_id)
    if status is not None:
        stmt = stmt.where(Leave.status == LeaveStatus(status).value)
    if start is not None:
        stmt = stmt.where(Leave.date >= start)
    if end is not None:
        stmt = stmt.where(Leave.date <= end)
    stmt = stmt.order_by(Leave.date, Leave.created_at)

    with reading("load leaves"):
        return list(session.exec(stmt).all())


def create_leave(session: Session, candidate: LeaveCreate) -> Leave:
    # Overlapping leave requests are allowed; only the time range is checked
    if (candidate.start_time is None) != (candidate.end_time is None):
        raise ValidationError("startTime and endTime must be given together for a partial-day leave")
    if candidate.start_time is not None:
        Interval.from_hhmm(candidate.start_time, candidate.end_time)

    leave = Leave(
        barber_id=candidate.barber_id,
        date=candidate.date,
        start_time=candidate.start_time,
        end_time=candidate.end_time,
        type=candidate.type.value,
        status=candidate.status.value,
        reason=candidate.reason,
    )
    with write_transaction(session, "create leave"):
        session.add(leave)

    session.refresh(leave)
    logger.info(
        "Created %s %s leave %s for barber %s on %s",
        leave.status, leave.type, leave.id, leave.barber_id, leave.date,
    )
    return leave


def update_leave_status(session: Session, leave_id: str, status: LeaveStatus) -> Leave:
    with write_transaction(session, "update leave"):
        leave = session.get(Leave, leave_id)
        if leave is None:
            raise NotFoundError("Leave not found")
        leave.status = LeaveStatus(status).value
        leave.updated_at = utcnow()
        session.add(leave)

    session.refresh(leave)
    logger.info("Leave %s is now %s", leave.id, leave.status)
    return leave


# Shift templates

def list_templates(session: Session) -> List[ShiftTemplate]:
    with reading("load shift templates"):
        stored = session.exec(select(ShiftTemplate).order_by(ShiftTemplate.name)).all()
    if stored:
        return list(stored)
    return [ShiftTemplate(**t) for t in DEFAULT_SHIFT_TEMPLATES]


def upsert_template(session: Session, candidate: TemplateUpsert) -> ShiftTemplate:
    Interval.from_hhmm(candidate.start_time, candidate.end_time)
    if (candidate.break_start is None) != (candidate.break_end is None):
        raise ValidationError("breakStart and breakEnd must be given together")
    if candidate.break_start is not None:
        Interval.from_hhmm(candidate.break_start, candidate.break_end)

    values = candidate.model_dump(exclude={"id"})
    with write_transaction(session, "save shift template"):
        template = session.get(ShiftTemplate, candidate.id) if candidate.id else None
        if template is None:
            template = ShiftTemplate(**values)
            if candidate.id:
                template.id = candidate.id
        else:
            for key, value in values.items():
                setattr(template, key, value)
        session.add(template)

    session.refresh(template)
    return template


def get_day_schedule(session: Session, branch_id: str, barber_id: str, day: date):
    """Shifts at the branch and leaves of any status for one barber and day."""
    shifts = list_shifts(session, branch_id=branch_id, barber_id=barber_id, start=day, end=day)
    leaves = list_leaves(session, barber_id=barber_id, start=day, end=day)
    return shifts, leaves
