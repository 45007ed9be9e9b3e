"""
Tests for barbershop/scheduling.py - shift, leave and template stores.
"""
from datetime import timedelta
from itertools import combinations

import pytest

from barbershop import scheduling
from barbershop.core import Interval
from barbershop.errors import NotFoundError, OverlapError, ValidationError
from barbershop.schemas import (
    BreakSchema, LeaveCreate, LeaveStatus, ShiftCreate, ShiftType, ShiftUpdate, TemplateUpsert,
)

from conftest import TOMORROW


def shift_payload(start, end, **overrides):
    values = dict(
        barber_id="barber-1",
        branch_id="branch-1",
        date=TOMORROW,
        start_time=start,
        end_time=end,
    )
    values.update(overrides)
    return ShiftCreate(**values)


def assert_no_overlaps(shifts):
    by_day = {}
    for s in shifts:
        by_day.setdefault((s.barber_id, s.date), []).append(s)
    for siblings in by_day.values():
        for a, b in combinations(siblings, 2):
            assert not Interval.from_hhmm(a.start_time, a.end_time).overlaps(
                Interval.from_hhmm(b.start_time, b.end_time)
            )


class TestCreateShift:
    def test_create_returns_persisted_shift(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload(
            "10:00", "18:00",
            breaks=[BreakSchema(start_time="13:00", end_time="14:00")],
            type=ShiftType.split,
        ))

        assert shift.id
        assert shift.type == "split"
        assert [(b.start_time, b.end_time) for b in shift.breaks] == [("13:00", "14:00")]
        assert scheduling.list_shifts(session) == [shift]

    def test_overlapping_shift_rejected(self, session, directory):
        scheduling.create_shift(session, shift_payload("12:00", "17:00"))

        with pytest.raises(OverlapError):
            scheduling.create_shift(session, shift_payload("09:00", "13:00"))
        assert len(scheduling.list_shifts(session)) == 1

    def test_overlap_checked_across_branches(self, session, directory):
        scheduling.create_shift(session, shift_payload("12:00", "17:00"))

        with pytest.raises(OverlapError):
            scheduling.create_shift(session, shift_payload("16:00", "20:00", branch_id="branch-2"))

    def test_adjacent_shifts_allowed(self, session, directory):
        scheduling.create_shift(session, shift_payload("10:00", "14:00"))
        scheduling.create_shift(session, shift_payload("14:00", "18:00"))
        assert len(scheduling.list_shifts(session)) == 2

    def test_other_barber_or_day_not_a_conflict(self, session, directory):
        scheduling.create_shift(session, shift_payload("10:00", "18:00"))
        scheduling.create_shift(session, shift_payload("10:00", "18:00", barber_id="barber-2"))
        scheduling.create_shift(session, shift_payload("10:00", "18:00", date=TOMORROW + timedelta(days=1)))
        assert len(scheduling.list_shifts(session)) == 3

    def test_breaks_may_overlap_each_other(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload(
            "10:00", "18:00",
            breaks=[
                BreakSchema(start_time="13:00", end_time="14:00"),
                BreakSchema(start_time="13:30", end_time="14:30"),
            ],
        ))
        assert len(shift.breaks) == 2

    def test_inverted_times_rejected(self, session, directory):
        with pytest.raises(ValidationError):
            scheduling.create_shift(session, shift_payload("18:00", "10:00"))
        with pytest.raises(ValidationError):
            scheduling.create_shift(session, shift_payload(
                "10:00", "18:00", breaks=[BreakSchema(start_time="14:00", end_time="13:00")]
            ))

    def test_unknown_barber_or_branch(self, session, directory):
        with pytest.raises(NotFoundError):
            scheduling.create_shift(session, shift_payload("10:00", "18:00", barber_id="ghost"))
        with pytest.raises(NotFoundError):
            scheduling.create_shift(session, shift_payload("10:00", "18:00", branch_id="nowhere"))


class TestUpdateShift:
    def test_partial_update_keeps_other_end(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload("10:00", "18:00"))

        updated = scheduling.update_shift(session, shift.id, ShiftUpdate(end_time="20:00"))
        assert (updated.start_time, updated.end_time) == ("10:00", "20:00")

    def test_update_ignores_itself(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload("10:00", "18:00"))
        updated = scheduling.update_shift(session, shift.id, ShiftUpdate(start_time="11:00"))
        assert updated.start_time == "11:00"

    def test_update_into_sibling_rejected(self, session, directory):
        scheduling.create_shift(session, shift_payload("10:00", "13:00"))
        late = scheduling.create_shift(session, shift_payload("14:00", "18:00"))

        with pytest.raises(OverlapError):
            scheduling.update_shift(session, late.id, ShiftUpdate(start_time="12:00"))

        session.refresh(late)
        assert late.start_time == "14:00"

    def test_breaks_replaced(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload(
            "10:00", "18:00", breaks=[BreakSchema(start_time="13:00", end_time="14:00")]
        ))

        updated = scheduling.update_shift(session, shift.id, ShiftUpdate(
            breaks=[BreakSchema(start_time="15:00", end_time="15:30")], type=ShiftType.half,
        ))
        assert [(b.start_time, b.end_time) for b in updated.breaks] == [("15:00", "15:30")]
        assert updated.type == "half"

    def test_update_missing(self, session, directory):
        with pytest.raises(NotFoundError):
            scheduling.update_shift(session, "missing", ShiftUpdate(start_time="11:00"))

    def test_invariant_holds_after_mixed_operations(self, session, directory):
        attempts = [("10:00", "12:00"), ("11:00", "13:00"), ("12:00", "15:00"), ("14:30", "16:00"), ("16:00", "20:00")]
        created = []
        for start, end in attempts:
            try:
                created.append(scheduling.create_shift(session, shift_payload(start, end)))
            except OverlapError:
                pass
        for shift in created:
            try:
                scheduling.update_shift(session, shift.id, ShiftUpdate(end_time="17:00"))
            except (OverlapError, ValidationError):
                pass

        assert_no_overlaps(scheduling.list_shifts(session))


class TestDeleteAndList:
    def test_delete(self, session, directory):
        shift = scheduling.create_shift(session, shift_payload("10:00", "18:00"))
        scheduling.delete_shift(session, shift.id)
        assert scheduling.list_shifts(session) == []

    def test_delete_missing(self, session, directory):
        with pytest.raises(NotFoundError):
            scheduling.delete_shift(session, "missing")

    def test_list_filters(self, session, directory):
        scheduling.create_shift(session, shift_payload("10:00", "18:00"))
        scheduling.create_shift(session, shift_payload("10:00", "18:00", barber_id="barber-2", branch_id="branch-2"))
        scheduling.create_shift(session, shift_payload("10:00", "18:00", date=TOMORROW + timedelta(days=5)))

        assert len(scheduling.list_shifts(session, branch_id="branch-1")) == 2
        assert len(scheduling.list_shifts(session, barber_id="barber-2")) == 1
        assert len(scheduling.list_shifts(session, start=TOMORROW, end=TOMORROW)) == 2
        assert len(scheduling.list_shifts(session, start=TOMORROW + timedelta(days=1))) == 1


class TestLeaves:
    def test_created_pending_by_default(self, session):
        leave = scheduling.create_leave(session, LeaveCreate(
            barber_id="barber-1", type="sick", date=TOMORROW, reason="flu",
        ))
        assert leave.status == "pending"
        assert leave.start_time is None

    def test_overlapping_leaves_allowed(self, session):
        for _ in range(2):
            scheduling.create_leave(session, LeaveCreate(
                barber_id="barber-1", type="vacation", date=TOMORROW,
                start_time="10:00", end_time="12:00",
            ))
        assert len(scheduling.list_leaves(session, barber_id="barber-1")) == 2

    def test_partial_leave_needs_both_ends(self, session):
        with pytest.raises(ValidationError):
            scheduling.create_leave(session, LeaveCreate(
                barber_id="barber-1", type="other", date=TOMORROW, start_time="10:00",
            ))
        with pytest.raises(ValidationError):
            scheduling.create_leave(session, LeaveCreate(
                barber_id="barber-1", type="other", date=TOMORROW, start_time="12:00", end_time="10:00",
            ))

    def test_status_update_is_idempotent(self, session):
        leave = scheduling.create_leave(session, LeaveCreate(
            barber_id="barber-1", type="vacation", date=TOMORROW,
        ))
        scheduling.update_leave_status(session, leave.id, LeaveStatus.approved)
        again = scheduling.update_leave_status(session, leave.id, LeaveStatus.approved)
        assert again.status == "approved"

        assert scheduling.list_leaves(session, status=LeaveStatus.approved) == [again]
        assert scheduling.list_leaves(session, status=LeaveStatus.pending) == []

    def test_status_update_missing(self, session):
        with pytest.raises(NotFoundError):
            scheduling.update_leave_status(session, "missing", LeaveStatus.denied)


class TestTemplates:
    def test_defaults_until_one_is_stored(self, session):
        names = [t.name for t in scheduling.list_templates(session)]
        assert names == ["Full Day (10-10)", "Half Day (12-5)"]

    def test_upsert_by_id(self, session):
        scheduling.upsert_template(session, TemplateUpsert(
            id="morning", name="Morning", start_time="10:00", end_time="14:00",
        ))
        scheduling.upsert_template(session, TemplateUpsert(
            id="morning", name="Morning", start_time="09:00", end_time="13:00",
        ))

        templates = scheduling.list_templates(session)
        assert len(templates) == 1
        assert templates[0].start_time == "09:00"

    def test_break_needs_both_ends(self, session):
        with pytest.raises(ValidationError):
            scheduling.upsert_template(session, TemplateUpsert(
                name="Odd", start_time="10:00", end_time="14:00", break_start="12:00",
            ))
