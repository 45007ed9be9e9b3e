# barbershop/schemas.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import date
from typing import List, Optional

HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"
HHMM_END = r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$"


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case accepted too
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ShiftType(str, Enum):
    full = "full"
    half = "half"
    split = "split"


class LeaveType(str, Enum):
    vacation = "vacation"
    sick = "sick"
    unpaid = "unpaid"
    other = "other"


class LeaveStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    denied = "denied"


class BreakSchema(CamelModel):
    start_time: str = Field(pattern=HHMM)
    end_time: str = Field(pattern=HHMM_END)


# Shifts

class ShiftCreate(CamelModel):
    barber_id: str = Field(min_length=1)
    branch_id: str = Field(min_length=1)
    date: date
    start_time: str = Field(pattern=HHMM)
    end_time: str = Field(pattern=HHMM_END)
    breaks: List[BreakSchema] = Field(default_factory=list)
    type: ShiftType = ShiftType.full


class ShiftUpdate(CamelModel):
    start_time: Optional[str] = Field(default=None, pattern=HHMM)
    end_time: Optional[str] = Field(default=None, pattern=HHMM_END)
    breaks: Optional[List[BreakSchema]] = None
    type: Optional[ShiftType] = None


class ShiftPublic(CamelModel):
    id: str
    barber_id: str
    branch_id: str
    date: date
    start_time: str
    end_time: str
    type: ShiftType
    breaks: List[BreakSchema]


# Leaves

class LeaveCreate(CamelModel):
    barber_id: str = Field(min_length=1)
    type: LeaveType
    date: date
    start_time: Optional[str] = Field(default=None, pattern=HHMM)
    end_time: Optional[str] = Field(default=None, pattern=HHMM_END)
    status: LeaveStatus = LeaveStatus.pending
    reason: Optional[str] = None


class LeaveStatusUpdate(CamelModel):
    status: LeaveStatus


class LeavePublic(CamelModel):
    id: str
    barber_id: str
    type: LeaveType
    date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: LeaveStatus
    reason: Optional[str] = None


class DaySchedule(CamelModel):
    shifts: List[ShiftPublic]
    leaves: List[LeavePublic]


# Shift templates

class TemplateUpsert(CamelModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    start_time: str = Field(pattern=HHMM)
    end_time: str = Field(pattern=HHMM_END)
    break_start: Optional[str] = Field(default=None, pattern=HHMM)
    break_end: Optional[str] = Field(default=None, pattern=HHMM_END)


class TemplatePublic(CamelModel):
    id: str
    name: str
    start_time: str
    end_time: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None


# Directory

class BranchCreate(CamelModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None


class BranchPublic(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None


class BarberCreate(CamelModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    specialties: List[str] = Field(default_factory=list)
    experience: Optional[str] = None
    branches: List[str] = Field(default_factory=list)


class BarberPublic(CamelModel):
    id: str
    name: str
    specialties: List[str]
    experience: Optional[str] = None
    branches: List[str]


# Appointments

class AppointmentCreate(CamelModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3)
    mobile_number: str = Field(min_length=1, max_length=20)
    appointment_date: date
    appointment_time: str = Field(pattern=HHMM)
    branch_id: str = Field(min_length=1)
    barber_id: str = Field(min_length=1)
    services: str = Field(min_length=1)


class AppointmentUpdate(CamelModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3)
    mobile_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = Field(default=None, pattern=HHMM)
    branch_id: Optional[str] = Field(default=None, min_length=1)
    barber_id: Optional[str] = Field(default=None, min_length=1)
    services: Optional[str] = Field(default=None, min_length=1)


class AppointmentPublic(CamelModel):
    id: str
    full_name: str
    email: str
    mobile_number: str
    appointment_date: date
    appointment_time: str
    branch_id: str
    barber_id: str
    services: str


class AppointmentResponse(CamelModel):
    success: bool = True
    data: AppointmentPublic


# Availability

class TimeSlot(CamelModel):
    time: str
    available: bool


class AvailabilityData(CamelModel):
    date: date
    barber_id: str
    branch_id: str
    time_slots: List[TimeSlot]


class AvailabilityResponse(CamelModel):
    success: bool = True
    data: AvailabilityData


class AvailableDatesData(CamelModel):
    barber_id: str
    branch_id: str
    available_dates: List[date]


class AvailableDatesResponse(CamelModel):
    success: bool = True
    data: AvailableDatesData
