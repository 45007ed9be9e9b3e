# barbershop/models.py

from typing import Optional, List
from datetime import datetime, date as Date, timezone
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column, Relationship


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Branch(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(index=True)
    address: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Barber(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    experience: Optional[str] = None
    # branch ids the barber works at
    branches: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)


class Shift(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)

    barber_id: str = Field(index=True)
    branch_id: str = Field(index=True)
    date: Date = Field(index=True)
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    type: str = "full"  # full / half / split

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    breaks: List["ShiftBreak"] = Relationship(
        back_populates="shift",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "lazy": "selectin",
            "order_by": "ShiftBreak.start_time",
        },
    )


class ShiftBreak(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    shift_id: Optional[str] = Field(default=None, foreign_key="shift.id", index=True)
    start_time: str
    end_time: str

    shift: Optional[Shift] = Relationship(back_populates="breaks")


class Leave(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)

    barber_id: str = Field(index=True)
    date: Date = Field(index=True)
    # both empty = full-day leave
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    type: str  # vacation / sick / unpaid / other
    status: str = Field(default="pending", index=True)  # pending / approved / denied
    reason: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ShiftTemplate(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    start_time: str
    end_time: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None


class Appointment(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint(
            "barber_id", "branch_id", "appointment_date", "appointment_time",
            name="uq_barber_branch_slot",
        ),
    )

    id: str = Field(default_factory=new_id, primary_key=True)

    full_name: str
    email: str
    mobile_number: str

    barber_id: str = Field(index=True)
    branch_id: str = Field(index=True)
    appointment_date: Date = Field(index=True)
    appointment_time: str  # HH:MM
    services: str

    created_at: datetime = Field(default_factory=utcnow)
