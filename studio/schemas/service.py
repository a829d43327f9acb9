from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from studio.utils.formatting import parse_price

DEFAULT_SERVICE_IMAGE = "https://picsum.photos/seed/default/600/800"

class ServiceCreate(BaseModel):
    name: str
    price: float
    description: str = ""
    longDescription: str = ""
    duration: str = ""  # Display label, e.g. "1h 30m"
    maintenance: str = ""
    image: str = DEFAULT_SERVICE_IMAGE

    @field_validator("price", mode="before")
    @classmethod
    def price_from_label(cls, value):
        # Accept "R$ 130,00" as well as plain numbers
        return parse_price(value)

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    longDescription: Optional[str] = None
    duration: Optional[str] = None
    maintenance: Optional[str] = None
    image: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def price_from_label(cls, value):
        if value is None:
            return None
        return parse_price(value)

class ServiceResponse(BaseModel):
    id: str
    name: str
    price: float
    priceLabel: str
    description: str = ""
    longDescription: str = ""
    duration: str = ""
    durationMinutes: int
    maintenance: str = ""
    image: str = DEFAULT_SERVICE_IMAGE
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
