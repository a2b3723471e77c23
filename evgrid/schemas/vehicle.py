from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evgrid.db.models import TEXT_LENGTH, WIRE_NAMES

Text = Annotated[str, Field(max_length=TEXT_LENGTH)]


def _wire_name(name: str) -> str:
    return WIRE_NAMES.get(name, name)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=_wire_name, populate_by_name=True)


class VehicleCreate(_CamelModel):
    brand: str = Field(min_length=1, max_length=TEXT_LENGTH)
    model: str = Field(min_length=1, max_length=TEXT_LENGTH)
    accel_sec: float = 0
    top_speed_km: int = 0
    range_km: int = 0
    efficiency_kwh_100km: int = 0
    fast_charg_kmh: int = 0
    rapid_char: Text = "No"
    power_train: Text = ""
    plug_type: Text = ""
    body_style: Text = ""
    segment: Text = ""
    seats: int = 5
    price_euro: int = 0
    date: Text = ""


class VehicleUpdate(_CamelModel):
    brand: str | None = Field(default=None, max_length=TEXT_LENGTH)
    model: str | None = Field(default=None, max_length=TEXT_LENGTH)
    accel_sec: float | None = None
    top_speed_km: int | None = None
    range_km: int | None = None
    efficiency_kwh_100km: int | None = None
    fast_charg_kmh: int | None = None
    rapid_char: Text | None = None
    power_train: Text | None = None
    plug_type: Text | None = None
    body_style: Text | None = None
    segment: Text | None = None
    seats: int | None = None
    price_euro: int | None = None
    date: Text | None = None

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        # Omitted fields are left alone; columns are not nullable
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self


class VehicleResponse(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    brand: str
    model: str
    accel_sec: float
    top_speed_km: int
    range_km: int
    efficiency_kwh_100km: int
    fast_charg_kmh: int
    rapid_char: str
    power_train: str
    plug_type: str
    body_style: str
    segment: str
    seats: int
    price_euro: int
    date: str


class VehicleListResponse(BaseModel):
    data: list[VehicleResponse]
    total: int
    page: int
    totalPages: int


class VehicleStatsResponse(BaseModel):
    total: int
    stats: dict
    brands: dict[str, int]


class MessageResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    message: str
    count: int
