from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List

from studio.utils.dates import normalize_time

class TimeRange(BaseModel):
    start: str  # "HH:MM", inclusive
    end: str  # "HH:MM", exclusive

    @field_validator("start", "end")
    @classmethod
    def zero_pad(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def check_order(self):
        if self.start >= self.end:
            raise ValueError(f"Slot start {self.start} must be before end {self.end}")
        return self

class OperatingHours(BaseModel):
    dayOfWeek: int = Field(..., ge=0, le=6)  # 0 = Sunday
    isOpen: bool = False
    slots: List[TimeRange] = []

class OperatingHoursUpdate(BaseModel):
    hours: List[OperatingHours]

    @field_validator("hours")
    @classmethod
    def one_entry_per_day(cls, value: List[OperatingHours]) -> List[OperatingHours]:
        days = [h.dayOfWeek for h in value]
        if len(days) != len(set(days)):
            raise ValueError("Each day of week may appear only once")
        return value
