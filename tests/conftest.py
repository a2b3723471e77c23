"""Shared fixtures: a throwaway SQLite store and an in-process API client."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from evgrid.config import settings
from evgrid.db.database import Database
from evgrid.db.models import Vehicle
from evgrid.main import create_app


def make_vehicle(**overrides) -> dict:
    """Column values for one vehicle, based on a BMW i4."""
    data = {
        "brand": "BMW",
        "model": "i4 eDrive40",
        "accel_sec": 5.7,
        "top_speed_km": 190,
        "range_km": 470,
        "efficiency_kwh_100km": 170,
        "fast_charg_kmh": 620,
        "rapid_char": "Yes",
        "power_train": "RWD",
        "plug_type": "Type 2 CCS",
        "body_style": "Sedan",
        "segment": "D",
        "seats": 5,
        "price_euro": 58300,
        "date": "2021-06-01",
    }
    data.update(overrides)
    return data


FLEET = [
    make_vehicle(),
    make_vehicle(brand="Tesla", model="Model 3 Long Range", accel_sec=4.6, top_speed_km=233,
                 range_km=450, efficiency_kwh_100km=161, fast_charg_kmh=940, power_train="AWD",
                 price_euro=55480, seats=5),
    make_vehicle(brand="Smart", model="EQ fortwo coupe", accel_sec=11.6, top_speed_km=130,
                 range_km=100, efficiency_kwh_100km=167, fast_charg_kmh=0, rapid_char="No",
                 plug_type="Type 2", body_style="Hatchback", segment="A", seats=2, price_euro=21387),
    make_vehicle(brand="Renault", model="Kangoo Maxi ZE 33", accel_sec=22.4, top_speed_km=130,
                 range_km=160, efficiency_kwh_100km=194, fast_charg_kmh=0, rapid_char="No",
                 power_train="FWD", plug_type="Type 2", body_style="SPV", segment="N", seats=7,
                 price_euro=36373),
    make_vehicle(brand="Porsche", model="Taycan Turbo S", accel_sec=2.8, top_speed_km=260,
                 range_km=375, efficiency_kwh_100km=223, fast_charg_kmh=780, power_train="AWD",
                 segment="F", seats=4, price_euro=180781, body_style=""),
]


@pytest.fixture
def vehicle_factory():
    """Build column values for one vehicle; keyword arguments override the defaults."""
    return make_vehicle


@pytest.fixture
def fleet_rows() -> list[dict]:
    return [dict(row) for row in FLEET]


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'evgrid-test.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
async def seeded(session) -> list[Vehicle]:
    vehicles = [Vehicle(**row) for row in FLEET]
    session.add_all(vehicles)
    await session.commit()
    return vehicles


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", path)
    return path


@pytest.fixture
async def client(database, upload_dir):
    app = create_app(database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
