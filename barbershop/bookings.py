# barbershop/bookings.py

import logging
from datetime import date
from typing import List, Optional, Set

from sqlmodel import Session, select

from .db import reading, write_transaction
from .errors import NotFoundError, SlotUnavailableError
from .models import Appointment
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

ALREADY_BOOKED = "This time slot is already booked. Please select a different time."


def booked_times(session: Session, barber_id: str, branch_id: str, day: date) -> Set[str]:
    with reading("load appointments"):
        rows = session.exec(
            select(Appointment.appointment_time)
            .where(Appointment.barber_id == barber_id)
            .where(Appointment.branch_id == branch_id)
            .where(Appointment.appointment_date == day)
        ).all()
    return set(rows)


def create_appointment(session: Session, candidate: AppointmentCreate) -> Appointment:
    # the unique constraint catches a booking that slipped in after the availability check
    appt = Appointment(**candidate.model_dump())
    with write_transaction(session, "create appointment", conflict=SlotUnavailableError(ALREADY_BOOKED)):
        session.add(appt)

    session.refresh(appt)
    logger.info(
        "Booked appointment %s: barber %s at branch %s on %s %s",
        appt.id, appt.barber_id, appt.branch_id, appt.appointment_date, appt.appointment_time,
    )
    return appt


def list_appointments(
    session: Session,
    day: Optional[date] = None,
    barber_id: Optional[str] = None,
    branch_id: Optional[str] = None,
) -> List[Appointment]:
    stmt = select(Appointment)
    if day is not None:
        stmt = stmt.where(Appointment.appointment_date == day)
    if barber_id:
        stmt = stmt.where(Appointment.barber_id == barber_id)
    if branch_id:
        stmt = stmt.where(Appointment.branch_id == branch_id)
    stmt = stmt.order_by(Appointment.appointment_date, Appointment.appointment_time)

    with reading("load appointments"):
        return list(session.exec(stmt).all())


def get_appointment(session: Session, appt_id: str) -> Appointment:
    with reading("load appointment"):
        appt = session.get(Appointment, appt_id)
    if appt is None:
        raise NotFoundError("Appointment not found")
    return appt


def update_appointment(session: Session, appt_id: str, changes: AppointmentUpdate) -> Appointment:
    with write_transaction(session, "update appointment", conflict=SlotUnavailableError(ALREADY_BOOKED)):
        appt = session.get(Appointment, appt_id)
        if appt is None:
            raise NotFoundError("Appointment not found")
        for key, value in changes.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(appt, key, value)
        session.add(appt)

    session.refresh(appt)
    logger.info("Updated appointment %s", appt.id)
    return appt


def delete_appointment(session: Session, appt_id: str) -> None:
    with write_transaction(session, "delete appointment"):
        appt = session.get(Appointment, appt_id)
        if appt is None:
            raise NotFoundError("Appointment not found")
        session.delete(appt)
    logger.info("Deleted appointment %s", appt_id)
