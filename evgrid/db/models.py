from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Index
from evgrid.db.database import Base

# Matches the VARCHAR(255) the text columns had in the original store
TEXT_LENGTH = 255


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand = Column(String(TEXT_LENGTH), nullable=False, default="")
    model = Column(String(TEXT_LENGTH), nullable=False, default="")
    accel_sec = Column(Numeric(5, 2, asdecimal=False), nullable=False, default=0)  # 0-100 km/h
    top_speed_km = Column(Integer, nullable=False, default=0)
    range_km = Column(Integer, nullable=False, default=0)
    efficiency_kwh_100km = Column(Integer, nullable=False, default=0)
    fast_charg_kmh = Column(Integer, nullable=False, default=0)
    rapid_char = Column(String(TEXT_LENGTH), nullable=False, default="No")  # "Yes" / "No"
    power_train = Column(String(TEXT_LENGTH), nullable=False, default="")  # RWD, AWD, FWD
    plug_type = Column(String(TEXT_LENGTH), nullable=False, default="")
    body_style = Column(String(TEXT_LENGTH), nullable=False, default="")
    segment = Column(String(TEXT_LENGTH), nullable=False, default="")
    seats = Column(Integer, nullable=False, default=5)
    price_euro = Column(Integer, nullable=False, default=0)
    date = Column(String(TEXT_LENGTH), nullable=False, default="")  # free-form, not validated
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_vehicle_brand_model", "brand", "model"),
        Index("ix_vehicle_price", "price_euro"),
    )


# Attribute name -> JSON field name used on the wire
WIRE_NAMES = {
    "id": "id",
    "brand": "brand",
    "model": "model",
    "accel_sec": "accelSec",
    "top_speed_km": "topSpeedKm",
    "range_km": "rangeKm",
    "efficiency_kwh_100km": "efficiencyKwh100km",
    "fast_charg_kmh": "fastChargKmh",
    "rapid_char": "rapidChar",
    "power_train": "powerTrain",
    "plug_type": "plugType",
    "body_style": "bodyStyle",
    "segment": "segment",
    "seats": "seats",
    "price_euro": "priceEuro",
    "date": "date",
}
