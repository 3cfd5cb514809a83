"""Schedule schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class ScheduleCreate(BaseModel):
    """Open shift block when ``staff_id`` is omitted, otherwise an assignment."""

    shift_date: date
    shift: str
    staff_id: int | None = None


class ScheduleBlockDelete(BaseModel):
    shift_date: date
    shift: str


class MonthRequest(BaseModel):
    month: int = Field(ge=1, le=12)
    year: int


class ShiftStaffResponse(BaseModel):
    id: int
    name: str
    role: str
    schedule_id: int


class ShiftBlockResponse(BaseModel):
    id: str
    time: str
    shift: str
    staff: list[ShiftStaffResponse]


class ScheduleDayResponse(BaseModel):
    shift_date: date
    date: int
    shifts: list[ShiftBlockResponse]


class MonthScheduleResponse(BaseModel):
    month: int
    year: int
    schedule: list[ScheduleDayResponse]


class ScheduleEntryResponse(BaseModel):
    id: int
    shift_date: date
    shift: str
    staff_id: int | None = None

    model_config = ConfigDict(from_attributes=True)
