from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from studio.utils.dates import normalize_date, normalize_time
from studio.utils.formatting import clean_phone

class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class _SlotFields(BaseModel):
    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"

    @field_validator("date", mode="before")
    @classmethod
    def canonical_date(cls, value):
        return normalize_date(value)

    @field_validator("time", mode="before")
    @classmethod
    def canonical_time(cls, value):
        return normalize_time(value)

class AppointmentCreate(_SlotFields):
    serviceId: str
    clientName: str = Field(..., min_length=1)
    clientWhatsapp: str = Field(..., min_length=1)

    @field_validator("clientWhatsapp")
    @classmethod
    def digits_only(cls, value: str) -> str:
        digits = clean_phone(value)
        if not digits:
            raise ValueError("WhatsApp number must contain digits")
        return digits

class AppointmentReschedule(_SlotFields):
    pass

class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

class Appointment(_SlotFields):
    id: str
    serviceId: str
    serviceName: str = "Serviço"
    clientName: str = "Cliente"
    clientWhatsapp: str = ""
    price: float = 0.0
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
