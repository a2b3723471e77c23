import io
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from evgrid.db.models import Vehicle

# (header, attribute, width, number format)
EXPORT_COLUMNS = [
    ("ID", "id", 7, None),
    ("Brand", "brand", 14, None),
    ("Model", "model", 30, None),
    ("Accel (s)", "accel_sec", 10, "0.0"),
    ("Top Speed (km/h)", "top_speed_km", 16, None),
    ("Range (km)", "range_km", 11, None),
    ("Efficiency (kWh/100km)", "efficiency_kwh_100km", 21, None),
    ("Fast Charge (km/h)", "fast_charg_kmh", 17, None),
    ("Rapid Charge", "rapid_char", 13, None),
    ("Power Train", "power_train", 12, None),
    ("Plug Type", "plug_type", 16, None),
    ("Body Style", "body_style", 14, None),
    ("Segment", "segment", 9, None),
    ("Seats", "seats", 7, None),
    ("Price (EUR)", "price_euro", 13, "#,##0"),
    ("Date", "date", 12, None),
]


def export_vehicles_to_excel(
    vehicles: list[Vehicle],
    stats: dict | None = None,
    brand_counts: dict | None = None,
) -> io.BytesIO:
    """Generate an Excel file from vehicle records."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Electric Vehicles"

    # Header style
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1C69D4", end_color="1C69D4", fill_type="solid")
    header_align = Alignment(horizontal="center", vertical="center")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    for col, (header, _, _, _) in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_align
        cell.border = thin_border

    light_fill = PatternFill(start_color="F2F3F4", end_color="F2F3F4", fill_type="solid")
    for row_idx, vehicle in enumerate(vehicles, 2):
        for col, (_, attr, _, number_format) in enumerate(EXPORT_COLUMNS, 1):
            cell = ws.cell(row=row_idx, column=col, value=getattr(vehicle, attr))
            if number_format:
                cell.number_format = number_format
            # Alternate row shading
            if row_idx % 2 == 0:
                cell.fill = light_fill

    for i, (_, _, width, _) in enumerate(EXPORT_COLUMNS, 1):
        ws.column_dimensions[get_column_letter(i)].width = width

    # Stats sheet
    if stats:
        ws_stats = wb.create_sheet("Statistics")
        ws_stats.cell(row=1, column=1, value="Metric").font = Font(bold=True)
        ws_stats.cell(row=1, column=2, value="Value").font = Font(bold=True)
        row = 2
        for key, value in stats.items():
            label = key.replace("_", " ").title()
            ws_stats.cell(row=row, column=1, value=label)
            ws_stats.cell(row=row, column=2, value=value)
            row += 1

        if brand_counts:
            row += 1
            ws_stats.cell(row=row, column=1, value="Brand").font = Font(bold=True)
            ws_stats.cell(row=row, column=2, value="Vehicles").font = Font(bold=True)
            for brand, count in brand_counts.items():
                row += 1
                ws_stats.cell(row=row, column=1, value=brand)
                ws_stats.cell(row=row, column=2, value=count)

        ws_stats.column_dimensions["A"].width = 28
        ws_stats.column_dimensions["B"].width = 15

    # Freeze header row
    ws.freeze_panes = "A2"

    # Auto-filter
    ws.auto_filter.ref = f"A1:{get_column_letter(len(EXPORT_COLUMNS))}1"

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output
