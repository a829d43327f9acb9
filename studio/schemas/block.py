from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import datetime

from studio.utils.dates import normalize_date

DEFAULT_BLOCK_REASON = "Ausência"

class AgendaBlockCreate(BaseModel):
    startDate: str  # "YYYY-MM-DD", inclusive
    endDate: str  # "YYYY-MM-DD", inclusive
    reason: str = DEFAULT_BLOCK_REASON

    @field_validator("startDate", "endDate", mode="before")
    @classmethod
    def canonical_date(cls, value):
        return normalize_date(value)

    @field_validator("reason")
    @classmethod
    def default_reason(cls, value: str) -> str:
        return value.strip() or DEFAULT_BLOCK_REASON

    @model_validator(mode="after")
    def check_range(self):
        if self.startDate > self.endDate:
            raise ValueError("startDate must not be after endDate")
        return self

class AgendaBlock(AgendaBlockCreate):
    id: str
    createdAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
