import logging
import math
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.db import crud
from evgrid.db.models import Vehicle
from evgrid.errors import MalformedFilter
from evgrid.services.filters import build_predicate, parse_filter, resolve_column

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("ASC", "DESC")


@dataclass
class VehicleQuery:
    search: str | None = None
    page: int = 1
    page_size: int = 10
    sort_field: str = "id"
    sort_direction: str = "ASC"
    filter: str | None = None


@dataclass
class VehiclePage:
    records: list[Vehicle]
    total_count: int
    page: int
    total_pages: int


def build_order_by(sort_field: str, sort_direction: str) -> list:
    try:
        column = resolve_column(sort_field)
    except MalformedFilter:
        raise MalformedFilter(f"Invalid sort field: {sort_field}")

    direction = sort_direction.upper()
    if direction not in SORT_DIRECTIONS:
        raise MalformedFilter(f"Invalid sort order: {sort_direction}")

    order = [column.desc() if direction == "DESC" else column.asc()]
    if column is not Vehicle.id:
        order.append(Vehicle.id.asc())
    return order


def query_predicate(query: VehicleQuery):
    return build_predicate(query.search, parse_filter(query.filter))


async def list_vehicles(db: AsyncSession, query: VehicleQuery) -> VehiclePage:
    """One page of vehicles matching the search and filter, plus the total match count."""
    predicate = query_predicate(query)
    order_by = build_order_by(query.sort_field, query.sort_direction)

    total = await crud.count_vehicles(db, predicate)
    records = await crud.find_vehicles(
        db,
        predicate,
        order_by=order_by,
        offset=(query.page - 1) * query.page_size,
        limit=query.page_size,
    )
    logger.debug(f"Vehicle query {query} matched {total}, returning {len(records)}")

    return VehiclePage(
        records=records,
        total_count=total,
        page=query.page,
        total_pages=math.ceil(total / query.page_size),
    )


async def find_all_matching(db: AsyncSession, query: VehicleQuery) -> list[Vehicle]:
    """Every vehicle matching the search and filter, sorted, without paging."""
    return await crud.find_vehicles(
        db,
        query_predicate(query),
        order_by=build_order_by(query.sort_field, query.sort_direction),
    )
