from datetime import date
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = r"^\d{2}:\d{2}$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

Keyword = Annotated[str, Field(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class MustStop(CamelModel):
    address: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    service_minutes: int = Field(ge=0)


class TripPlanRequest(CamelModel):
    start_address: str = Field(min_length=1)
    end_address: str = ""
    round_trip: bool = False
    date_iso: str = Field(alias="dateISO", pattern=DATE_PATTERN)
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    must_stops: List[MustStop] = []
    max_optional_stops: int = Field(ge=0, le=10)
    optional_service_minutes: int = Field(ge=5, le=60)
    keywords: List[Keyword] = []
    export_waypoint_limit: int = Field(default=25, ge=1, le=25)

    @field_validator("date_iso")
    @classmethod
    def _check_calendar_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_clock_time(cls, value: str) -> str:
        hours, minutes = (int(part) for part in value.split(":"))
        if hours > 23 or minutes > 59:
            raise ValueError(f"{value} is not a valid HH:MM time")
        return value

    @model_validator(mode="after")
    def _resolve_end_address(self) -> "TripPlanRequest":
        if self.round_trip:
            self.end_address = self.start_address
        elif not self.end_address:
            raise ValueError("endAddress is required unless roundTrip is true")
        return self
