"""Tests for the Excel export and the aggregate statistics behind it."""

from __future__ import annotations

import pytest
from openpyxl import load_workbook

from evgrid.db.models import Vehicle
from evgrid.services.aggregator import compute_vehicle_stats, count_by_brand
from evgrid.services.exporter import EXPORT_COLUMNS, export_vehicles_to_excel


@pytest.fixture
def fleet(fleet_rows) -> list[Vehicle]:
    return [Vehicle(id=i, **row) for i, row in enumerate(fleet_rows, 1)]


class TestVehicleStats:
    def test_empty(self) -> None:
        assert compute_vehicle_stats([]) == {}

    def test_values(self, fleet) -> None:
        stats = compute_vehicle_stats(fleet)

        assert stats["total_vehicles"] == 5
        assert stats["rapid_charge_share"] == 60.0
        assert stats["min_price_euro"] == 21387
        assert stats["max_price_euro"] == 180781
        assert stats["median_price_euro"] == 55480
        assert stats["median_range_km"] == 375
        assert stats["max_top_speed_km"] == 260

    def test_zero_values_are_excluded(self) -> None:
        vehicles = [Vehicle(brand="A", price_euro=0, rapid_char="No"), Vehicle(brand="B", price_euro=40000, rapid_char="No")]

        stats = compute_vehicle_stats(vehicles)

        assert stats["mean_price_euro"] == 40000
        assert "mean_range_km" not in stats

    def test_count_by_brand(self, fleet) -> None:
        vehicles = fleet + [Vehicle(brand="Tesla"), Vehicle(brand="")]

        counts = count_by_brand(vehicles)

        assert counts["Tesla"] == 2
        assert list(counts)[0] == "Tesla"
        assert "" not in counts


class TestExcelExport:
    def test_workbook_layout(self, fleet) -> None:
        vehicles = fleet

        output = export_vehicles_to_excel(vehicles, compute_vehicle_stats(vehicles), count_by_brand(vehicles))
        wb = load_workbook(output)

        ws = wb["Electric Vehicles"]
        assert [c.value for c in ws[1]] == [header for header, _, _, _ in EXPORT_COLUMNS]
        assert ws.max_row == len(vehicles) + 1
        assert ws["B2"].value == "BMW"
        assert ws.freeze_panes == "A2"

        stats_ws = wb["Statistics"]
        labels = [row[0].value for row in stats_ws.iter_rows(min_row=2)]
        assert "Total Vehicles" in labels
        assert "Porsche" in labels

    def test_no_stats_sheet_without_stats(self, fleet) -> None:
        wb = load_workbook(export_vehicles_to_excel(fleet))

        assert wb.sheetnames == ["Electric Vehicles"]
