from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from studio.utils.formatting import clean_phone

class ClientCreate(BaseModel):
    name: str
    whatsapp: str
    email: str = ""
    notes: Optional[str] = None

    @field_validator("whatsapp")
    @classmethod
    def digits_only(cls, value: str) -> str:
        digits = clean_phone(value)
        if not digits:
            raise ValueError("WhatsApp number must contain digits")
        return digits

class ClientUpdate(BaseModel):
    name: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("whatsapp")
    @classmethod
    def digits_only(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        digits = clean_phone(value)
        if not digits:
            raise ValueError("WhatsApp number must contain digits")
        return digits

class ClientResponse(BaseModel):
    id: str
    name: str
    whatsapp: str
    email: str = ""
    notes: Optional[str] = None
    totalSpent: float = 0.0
    createdAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
