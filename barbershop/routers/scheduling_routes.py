# barbershop/routers/scheduling_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barbershop import scheduling
from barbershop.db import get_session
from barbershop.schemas import (
    DaySchedule,
    LeaveCreate,
    LeavePublic,
    LeaveStatus,
    LeaveStatusUpdate,
    ShiftCreate,
    ShiftPublic,
    ShiftUpdate,
    TemplatePublic,
    TemplateUpsert,
)

router = APIRouter(
    prefix="/admin/scheduling",
    tags=["scheduling"],
)


# Shifts

@router.get("/shifts", response_model=List[ShiftPublic])
def list_shifts(
    branch_id: Optional[str] = Query(default=None, alias="branchId"),
    barber_id: Optional[str] = Query(default=None, alias="barberId"),
    start: Optional[date] = None,
    end: Optional[date] = None,
    session: Session = Depends(get_session),
):
    shifts = scheduling.list_shifts(
        session, branch_id=branch_id, barber_id=barber_id, start=start, end=end
    )
    return [ShiftPublic.model_validate(s) for s in shifts]


@router.post("/shifts", response_model=ShiftPublic, status_code=201)
def create_shift(
    shift: ShiftCreate,
    session: Session = Depends(get_session),
):
    db_shift = scheduling.create_shift(session, shift)
    return ShiftPublic.model_validate(db_shift)


@router.patch("/shifts/{shift_id}", response_model=ShiftPublic)
def update_shift(
    shift_id: str,
    changes: ShiftUpdate,
    session: Session = Depends(get_session),
):
    db_shift = scheduling.update_shift(session, shift_id, changes)
    return ShiftPublic.model_validate(db_shift)


@router.delete("/shifts/{shift_id}")
def delete_shift(
    shift_id: str,
    session: Session = Depends(get_session),
):
    scheduling.delete_shift(session, shift_id)
    return {"success": True}


# Leaves

@router.get("/leaves", response_model=List[LeavePublic])
def list_leaves(
    barber_id: Optional[str] = Query(default=None, alias="barberId"),
    status: Optional[LeaveStatus] = None,
    session: Session = Depends(get_session),
):
    leaves = scheduling.list_leaves(session, barber_id=barber_id, status=status)
    return [LeavePublic.model_validate(leave) for leave in leaves]


@router.post("/leaves", response_model=LeavePublic, status_code=201)
def create_leave(
    leave: LeaveCreate,
    session: Session = Depends(get_session),
):
    db_leave = scheduling.create_leave(session, leave)
    return LeavePublic.model_validate(db_leave)


@router.patch("/leaves/{leave_id}", response_model=LeavePublic)
def update_leave_status(
    leave_id: str,
    update: LeaveStatusUpdate,
    session: Session = Depends(get_session),
):
    db_leave = scheduling.update_leave_status(session, leave_id, update.status)
    return LeavePublic.model_validate(db_leave)


# Templates

@router.get("/templates", response_model=List[TemplatePublic])
def list_templates(session: Session = Depends(get_session)):
    return [TemplatePublic.model_validate(t) for t in scheduling.list_templates(session)]


@router.post("/templates", response_model=TemplatePublic, status_code=201)
def upsert_template(
    template: TemplateUpsert,
    session: Session = Depends(get_session),
):
    db_template = scheduling.upsert_template(session, template)
    return TemplatePublic.model_validate(db_template)


# Planner view of one barber's day

@router.get("/availability", response_model=DaySchedule)
def day_schedule(
    branch_id: str = Query(alias="branchId", min_length=1),
    barber_id: str = Query(alias="barberId", min_length=1),
    day: date = Query(alias="date"),
    session: Session = Depends(get_session),
):
    shifts, leaves = scheduling.get_day_schedule(session, branch_id, barber_id, day)
    return {
        "shifts": [ShiftPublic.model_validate(s) for s in shifts],
        "leaves": [LeavePublic.model_validate(leave) for leave in leaves],
    }
