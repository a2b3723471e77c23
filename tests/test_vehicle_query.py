"""Tests for paginated, sorted vehicle listing."""

from __future__ import annotations

import math

import pytest

from evgrid.db.models import Vehicle
from evgrid.errors import MalformedFilter
from evgrid.services.vehicle_query import VehicleQuery, find_all_matching, list_vehicles


@pytest.fixture
async def many(session, vehicle_factory) -> int:
    session.add_all([Vehicle(**vehicle_factory(model=f"Test {i:02d}", price_euro=30000 + i)) for i in range(23)])
    await session.commit()
    return 23


class TestPagination:
    @pytest.mark.parametrize("page_size", [1, 5, 10, 23, 50])
    async def test_page_invariants(self, session, many, page_size) -> None:
        expected_pages = math.ceil(many / page_size)
        seen = []
        for page in range(1, expected_pages + 2):
            result = await list_vehicles(session, VehicleQuery(page=page, page_size=page_size))
            assert len(result.records) <= page_size
            assert result.total_count == many
            assert result.total_pages == expected_pages
            seen.extend(v.id for v in result.records)
        assert len(seen) == len(set(seen)) == many

    async def test_page_past_the_end_is_empty(self, session, many) -> None:
        result = await list_vehicles(session, VehicleQuery(page=10, page_size=10))
        assert result.records == []
        assert result.page == 10

    async def test_no_matches(self, session) -> None:
        result = await list_vehicles(session, VehicleQuery())
        assert result.total_count == 0
        assert result.total_pages == 0


class TestSorting:
    async def test_default_is_id_ascending(self, session, seeded) -> None:
        result = await list_vehicles(session, VehicleQuery(page_size=100))
        ids = [v.id for v in result.records]
        assert ids == sorted(ids)

    async def test_sort_by_wire_name_descending(self, session, seeded) -> None:
        result = await list_vehicles(
            session, VehicleQuery(page_size=100, sort_field="priceEuro", sort_direction="desc")
        )
        assert [v.brand for v in result.records][:2] == ["Porsche", "BMW"]

    async def test_ties_break_on_id(self, session, seeded) -> None:
        result = await list_vehicles(session, VehicleQuery(page_size=100, sort_field="seats"))
        fives = [v.id for v in result.records if v.seats == 5]
        assert fives == sorted(fives)

    async def test_unknown_sort_field(self, session, seeded) -> None:
        with pytest.raises(MalformedFilter):
            await list_vehicles(session, VehicleQuery(sort_field="colour"))

    async def test_unknown_sort_direction(self, session, seeded) -> None:
        with pytest.raises(MalformedFilter):
            await list_vehicles(session, VehicleQuery(sort_direction="sideways"))


class TestFilteredListing:
    async def test_total_counts_matches_not_page(self, session, seeded) -> None:
        query = VehicleQuery(page_size=1, filter='{"rapidChar": {"operator": "equals", "value": "Yes"}}')
        result = await list_vehicles(session, query)
        assert len(result.records) == 1
        assert result.total_count == 3
        assert result.total_pages == 3

    async def test_find_all_matching_ignores_paging(self, session, seeded) -> None:
        vehicles = await find_all_matching(session, VehicleQuery(page_size=1, search="type 2"))
        assert len(vehicles) == len(seeded)
