from sqlalchemy import select, delete, func
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.db.models import Vehicle
from evgrid.errors import NotFound, ValidationFailure


# --- Reads ---

async def find_vehicles(
    db: AsyncSession,
    predicate=None,
    order_by: list | None = None,
    offset: int | None = None,
    limit: int | None = None,
) -> list[Vehicle]:
    query = select(Vehicle)
    if predicate is not None:
        query = query.where(predicate)
    if order_by:
        query = query.order_by(*order_by)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_vehicles(db: AsyncSession, predicate=None) -> int:
    query = select(func.count()).select_from(Vehicle)
    if predicate is not None:
        query = query.where(predicate)
    result = await db.execute(query)
    return result.scalar_one()


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle not found")
    return vehicle


# --- Single-record writes ---

async def create_vehicle(db: AsyncSession, data: dict) -> Vehicle:
    vehicle = Vehicle(**data)
    db.add(vehicle)
    await _commit(db)
    await db.refresh(vehicle)
    return vehicle


async def update_vehicle(db: AsyncSession, vehicle_id: int, changes: dict) -> Vehicle:
    vehicle = await get_vehicle(db, vehicle_id)
    for key, value in changes.items():
        setattr(vehicle, key, value)
    await _commit(db)
    await db.refresh(vehicle)
    return vehicle


async def delete_vehicle(db: AsyncSession, vehicle_id: int):
    vehicle = await get_vehicle(db, vehicle_id)
    await db.delete(vehicle)
    await db.commit()


async def _commit(db: AsyncSession):
    try:
        await db.commit()
    except (IntegrityError, DataError) as e:
        await db.rollback()
        raise ValidationFailure(f"Invalid data provided: {e.orig}") from e


# --- Bulk replace (caller owns the transaction) ---

async def delete_all_vehicles(db: AsyncSession) -> int:
    result = await db.execute(delete(Vehicle))
    return result.rowcount


async def insert_vehicles(db: AsyncSession, drafts: list[dict]) -> int:
    db.add_all([Vehicle(**draft) for draft in drafts])
    await db.flush()
    return len(drafts)
