from __future__ import annotations

from datetime import date, timedelta
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

OutputStyle = Literal["plain", "box", "table"]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class DateWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date

    @classmethod
    def starting(cls, today: date, horizon_days: int) -> "DateWindow":
        return cls(start_date=today, end_date=today + timedelta(days=horizon_days))

    @property
    def date_start(self) -> str:
        return self.start_date.isoformat()

    @property
    def date_stop(self) -> str:
        return self.end_date.isoformat()


class Place(BaseModel):
    """A vaccination site as returned by the location search endpoint.

    ``service_id``, ``distance_km`` and ``availabilities`` are filled in by the
    pipeline after the search, so they start out empty.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    establishment: str
    name: str = Field(default="", alias="name_fr")
    address: str = Field(default="", alias="formatted_address")
    service_id: Optional[str] = None
    distance_km: Optional[float] = None
    availabilities: List[str] = Field(default_factory=list)

    @property
    def first_availability(self) -> Optional[str]:
        return self.availabilities[0] if self.availabilities else None


class QueryOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    postal_code: str = Field(..., min_length=3, description="Postal code to search around, e.g. H2X1Y4")
    tolerance: int = Field(5, ge=0, description="Max days from today for the first open slot")
    distance: float = Field(10, gt=0, description="Search radius in km")
    poll: float = Field(1, gt=0, description="Minutes to wait between passes")
    specific_date: Optional[date] = Field(None, description="Only match this exact date")
    output: OutputStyle = "box"

    @field_validator("postal_code")
    @classmethod
    def _normalize_postal_code(cls, value: str) -> str:
        return "".join(value.split()).upper()
