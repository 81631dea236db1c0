# tutorlink/schemas/availability.py
"""
Availability schemas for TutorLink.

Weekday names are accepted in any case and normalized to lowercase;
times travel as 24h ``HH:MM`` strings.
"""

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.enums import DayOfWeek
from ..domain.availability import AvailabilityWindow, format_hhmm, parse_hhmm
from ._strict_base import StrictRequestModel


class AvailabilityWindowIn(StrictRequestModel):
    day_of_week: DayOfWeek = Field(..., description="Weekday, e.g. 'monday'")
    start_time: Optional[time] = Field(None, description="Start of the window, HH:MM")
    end_time: Optional[time] = Field(None, description="End of the window, HH:MM")

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day(cls, v: object) -> object:
        if isinstance(v, str):
            return DayOfWeek.parse(v)
        return v

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        """Blank strings mean the time was left out."""
        if isinstance(v, str):
            if not v.strip():
                return None
            return parse_hhmm(v)
        return v

    def to_window(self) -> AvailabilityWindow:
        return AvailabilityWindow(
            day_of_week=self.day_of_week, start_time=self.start_time, end_time=self.end_time
        )


class AvailabilityUpdate(StrictRequestModel):
    """Full replacement of a tutor's weekly availability."""

    availability: List[AvailabilityWindowIn] = Field(default_factory=list, max_length=7 * 4)


class AvailabilityWindowOut(BaseModel):
    day_of_week: DayOfWeek
    start_time: str
    end_time: str

    @classmethod
    def from_window(cls, window: AvailabilityWindow) -> "AvailabilityWindowOut":
        return cls(
            day_of_week=window.day_of_week,
            start_time=format_hhmm(window.start_time),
            end_time=format_hhmm(window.end_time),
        )


class AvailabilityResponse(BaseModel):
    tutor_id: str
    availability: List[AvailabilityWindowOut]


class AvailableSlotsResponse(BaseModel):
    date: date
    slots: List[str]
