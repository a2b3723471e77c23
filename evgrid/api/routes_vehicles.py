from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.config import settings
from evgrid.db import crud
from evgrid.db.database import get_db
from evgrid.schemas.vehicle import (
    MessageResponse,
    VehicleCreate,
    VehicleListResponse,
    VehicleResponse,
    VehicleStatsResponse,
    VehicleUpdate,
)
from evgrid.services.aggregator import compute_vehicle_stats, count_by_brand
from evgrid.services.exporter import export_vehicles_to_excel
from evgrid.services.vehicle_query import VehicleQuery, find_all_matching, list_vehicles

router = APIRouter(prefix="/api/v1/vehicles", tags=["vehicles"])

SortOrder = Literal["ASC", "DESC", "asc", "desc"]


@router.get("", response_model=VehicleListResponse)
async def get_vehicles(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sortBy: str = "id",
    sortOrder: SortOrder = "ASC",
    filter: str | None = Query(None, description="JSON object: field -> {operator, value}"),
    db: AsyncSession = Depends(get_db),
):
    result = await list_vehicles(db, VehicleQuery(
        search=search,
        page=page,
        page_size=limit,
        sort_field=sortBy,
        sort_direction=sortOrder,
        filter=filter,
    ))

    return VehicleListResponse(
        data=[VehicleResponse.model_validate(v) for v in result.records],
        total=result.total_count,
        page=result.page,
        totalPages=result.total_pages,
    )


@router.get("/stats", response_model=VehicleStatsResponse)
async def get_vehicle_stats(
    search: str | None = None,
    filter: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    vehicles = await find_all_matching(db, VehicleQuery(search=search, filter=filter))
    return VehicleStatsResponse(
        total=len(vehicles),
        stats=compute_vehicle_stats(vehicles),
        brands=count_by_brand(vehicles),
    )


@router.get("/export")
async def export_vehicles(
    search: str | None = None,
    sortBy: str = "id",
    sortOrder: SortOrder = "ASC",
    filter: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    vehicles = await find_all_matching(db, VehicleQuery(
        search=search,
        sort_field=sortBy,
        sort_direction=sortOrder,
        filter=filter,
    ))
    excel_file = export_vehicles_to_excel(
        vehicles,
        stats=compute_vehicle_stats(vehicles),
        brand_counts=count_by_brand(vehicles),
    )

    return StreamingResponse(
        excel_file,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=electric_vehicles.xlsx"},
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    return await crud.get_vehicle(db, vehicle_id)


@router.post("", response_model=VehicleResponse, status_code=201)
async def create_vehicle(body: VehicleCreate, db: AsyncSession = Depends(get_db)):
    return await crud.create_vehicle(db, body.model_dump())


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(vehicle_id: int, body: VehicleUpdate, db: AsyncSession = Depends(get_db)):
    return await crud.update_vehicle(db, vehicle_id, body.model_dump(exclude_unset=True))


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(vehicle_id: int, db: AsyncSession = Depends(get_db)):
    await crud.delete_vehicle(db, vehicle_id)
    return MessageResponse(message="Vehicle deleted successfully")
