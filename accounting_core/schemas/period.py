"""
Pydantic schemas for fiscal periods.
"""

import datetime as dt

from pydantic import BaseModel, Field, model_validator


class FiscalPeriodCreate(BaseModel):
    start_date: dt.date
    end_date: dt.date
    code: str | None = Field(default=None, max_length=30)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class FiscalPeriodResponse(BaseModel):
    id: int
    code: str
    start_date: dt.date
    end_date: dt.date
    is_locked: bool
    locked_at: dt.datetime | None
    locked_by: str | None

    model_config = {"from_attributes": True}
