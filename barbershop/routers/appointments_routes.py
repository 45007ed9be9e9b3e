# barbershop/routers/appointments_routes.py

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from barbershop import availability, bookings
from barbershop.config import Settings, get_settings
from barbershop.db import get_session
from barbershop.deps import get_now
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentResponse,
    AppointmentUpdate,
    AvailabilityResponse,
    AvailableDatesResponse,
)

router = APIRouter(
    tags=["appointments"],
)


@router.get("/appointments/availability", response_model=AvailabilityResponse)
def appointment_availability(
    day: date = Query(alias="date"),
    barber_id: str = Query(alias="barberId", min_length=1),
    branch_id: str = Query(alias="branchId", min_length=1),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    time_slots = availability.get_time_slots(session, day, barber_id, branch_id, now, settings)
    return {
        "success": True,
        "data": {
            "date": day,
            "barber_id": barber_id,
            "branch_id": branch_id,
            "time_slots": time_slots,
        },
    }


@router.get("/appointments/available-dates", response_model=AvailableDatesResponse)
def available_dates(
    barber_id: str = Query(alias="barberId", min_length=1),
    branch_id: str = Query(alias="branchId", min_length=1),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    today = availability.local_now(now, settings).date()

    if barber_id == settings.no_preference_id:
        dates = availability.open_days(today, settings)
    else:
        dates = availability.get_available_dates(session, barber_id, branch_id, today)

    return {
        "success": True,
        "data": {
            "barber_id": barber_id,
            "branch_id": branch_id,
            "available_dates": dates,
        },
    }


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
):
    # 1) Slot must be open for that barber right now
    availability.ensure_bookable(
        session, appt.appointment_date, appt.appointment_time,
        appt.barber_id, appt.branch_id, now, settings,
    )
    # 2) Insert; the unique constraint rejects a concurrent booking of the same slot
    db_appt = bookings.create_appointment(session, appt)
    return {"success": True, "data": AppointmentPublic.model_validate(db_appt)}


@router.get("/admin/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    day: Optional[date] = Query(default=None, alias="date"),
    barber_id: Optional[str] = Query(default=None, alias="barberId"),
    branch_id: Optional[str] = Query(default=None, alias="branchId"),
    session: Session = Depends(get_session),
):
    appts = bookings.list_appointments(session, day=day, barber_id=barber_id, branch_id=branch_id)
    return [AppointmentPublic.model_validate(a) for a in appts]


@router.patch("/admin/appointments/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: str,
    changes: AppointmentUpdate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    # 1) Apply the changes over the stored booking
    current = bookings.get_appointment(session, appt_id)
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)

    # 2) The result must still name a real barber, branch and grid time
    availability.check_booking_target(
        session,
        fields.get("barber_id", current.barber_id),
        fields.get("branch_id", current.branch_id),
        fields.get("appointment_time", current.appointment_time),
        settings,
    )

    # 3) Save; the unique constraint rejects moving onto a taken slot
    db_appt = bookings.update_appointment(session, appt_id, changes)
    return AppointmentPublic.model_validate(db_appt)


@router.delete("/admin/appointments/{appt_id}")
def delete_appointment(
    appt_id: str,
    session: Session = Depends(get_session),
):
    bookings.delete_appointment(session, appt_id)
    return {"success": True}
