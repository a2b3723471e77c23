"""Bulk replace of the vehicle table from an uploaded CSV file."""

import csv
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO

from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.db import crud
from evgrid.db.models import TEXT_LENGTH
from evgrid.errors import EVGridError, IncompleteData, InternalFailure, MalformedInput

logger = logging.getLogger(__name__)


class IngestStage(str, Enum):
    RECEIVED = "received"
    PARSING = "parsing"
    VALIDATING = "validating"
    REPLACING = "replacing"
    COMMITTED = "committed"
    REJECTED = "rejected"


TEXT = "text"
INTEGER = "integer"
DECIMAL = "decimal"

# field -> (accepted headers in lookup order, kind, default)
COLUMN_ALIASES = {
    "brand": (("Brand", "brand"), TEXT, ""),
    "model": (("Model", "model"), TEXT, ""),
    "accel_sec": (("AccelSec", "accelSec"), DECIMAL, 0.0),
    "top_speed_km": (("TopSpeed_Km", "topSpeedKm"), INTEGER, 0),
    "range_km": (("Range_Km", "rangeKm"), INTEGER, 0),
    "efficiency_kwh_100km": (("Efficiency_Kwh/100km", "efficiencyKwh100km"), INTEGER, 0),
    "fast_charg_kmh": (("FastCharg_Km_h", "fastChargKmh"), INTEGER, 0),
    "rapid_char": (("RapidChar", "rapidChar"), TEXT, "No"),
    "power_train": (("PowerTrain", "powerTrain"), TEXT, ""),
    "plug_type": (("PlugType", "plugType"), TEXT, ""),
    "body_style": (("BodyStyle", "bodyStyle"), TEXT, ""),
    "segment": (("Segment", "segment"), TEXT, ""),
    "seats": (("Seats", "seats"), INTEGER, 5),
    "price_euro": (("PriceEuro", "priceEuro"), INTEGER, 0),
    "date": (("Date", "date"), TEXT, ""),
}

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_DECIMAL_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


@dataclass
class IngestResult:
    count: int
    message: str


def parse_int(value: str, default: int) -> int:
    """Leading integer of `value` ("150 km" -> 150, "12.9" -> 12), else `default`."""
    match = _INT_PREFIX.match(value.strip())
    return int(match.group(0)) if match else default


def parse_decimal(value: str, default: float) -> float:
    match = _DECIMAL_PREFIX.match(value.strip())
    return float(match.group(0)) if match else default


def _lookup(row: dict, headers: tuple[str, ...]) -> str:
    for header in headers:
        value = row.get(header)
        if value is not None and value.strip() != "":
            return value.strip()
    return ""


def normalize_row(row: dict) -> dict:
    """Map one CSV row onto vehicle column values, substituting defaults."""
    draft = {}
    for field, (headers, kind, default) in COLUMN_ALIASES.items():
        raw = _lookup(row, headers)
        if kind == INTEGER:
            draft[field] = parse_int(raw, default)
        elif kind == DECIMAL:
            draft[field] = parse_decimal(raw, default)
        else:
            draft[field] = raw or default
    return draft


def parse_csv(stream: TextIO) -> list[dict]:
    """Read rows from a text stream opened with `newline=""`."""
    reader = csv.DictReader(stream, strict=True)
    rows = []
    try:
        for row in reader:
            if None in row:
                raise MalformedInput(
                    f"Invalid CSV format: line {reader.line_num} has more values than the header"
                )
            rows.append(row)
    except csv.Error as e:
        raise MalformedInput(f"Invalid CSV format: line {reader.line_num}: {e}")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Invalid CSV format: file is not UTF-8 text ({e.reason})")
    return rows


def read_csv_file(path: Path) -> list[dict]:
    with open(path, encoding="utf-8-sig", newline="") as f:
        return parse_csv(f)


def validate_drafts(drafts: list[dict]):
    if not drafts:
        raise IncompleteData("CSV file contains no vehicle rows")

    # Row numbers count the header as line 1
    incomplete = [i for i, d in enumerate(drafts, 2) if not d["brand"] and not d["model"]]
    if incomplete:
        shown = ", ".join(str(n) for n in incomplete[:10])
        more = "" if len(incomplete) <= 10 else ", ..."
        raise IncompleteData(
            f"{len(incomplete)} row(s) missing both brand and model (lines {shown}{more}); no data was modified"
        )

    for line, draft in enumerate(drafts, 2):
        for field, (headers, kind, _) in COLUMN_ALIASES.items():
            if kind == TEXT and len(draft[field]) > TEXT_LENGTH:
                raise MalformedInput(
                    f"Line {line}: {headers[0]} is longer than {TEXT_LENGTH} characters; no data was modified"
                )


async def replace_vehicles(db: AsyncSession, drafts: list[dict]) -> int:
    """Delete every vehicle and insert `drafts` in one transaction."""
    try:
        deleted = await crud.delete_all_vehicles(db)
        inserted = await crud.insert_vehicles(db, drafts)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(f"Replaced {deleted} vehicles with {inserted} new records")
    return inserted


class CsvIngest:
    """One upload's trip through parse, validate and replace.

    The uploaded file at `path` is removed whichever way `run` exits.
    """

    def __init__(self, db: AsyncSession, path: Path, filename: str | None = None):
        self.db = db
        self.path = Path(path)
        self.filename = filename or self.path.name
        self.stage = IngestStage.RECEIVED

    def _enter(self, stage: IngestStage):
        logger.debug(f"[{self.filename}] {self.stage.value} -> {stage.value}")
        self.stage = stage

    async def run(self) -> IngestResult:
        logger.info(f"CSV upload received: {self.filename}")
        try:
            self._enter(IngestStage.PARSING)
            rows = read_csv_file(self.path)
            logger.info(f"[{self.filename}] {len(rows)} rows to process")

            self._enter(IngestStage.VALIDATING)
            drafts = [normalize_row(row) for row in rows]
            validate_drafts(drafts)

            self._enter(IngestStage.REPLACING)
            try:
                count = await replace_vehicles(self.db, drafts)
            except Exception as e:
                logger.error(f"[{self.filename}] Replace failed, rolled back: {e}")
                raise InternalFailure(
                    "Error processing CSV file; the transaction was rolled back and no data was modified"
                ) from e

            self._enter(IngestStage.COMMITTED)
            return IngestResult(count=count, message=f"Successfully uploaded {count} electric vehicles")
        except EVGridError as e:
            logger.warning(f"[{self.filename}] Rejected during {self.stage.value}: {e.message}")
            e.stage = self.stage
            self._enter(IngestStage.REJECTED)
            raise
        finally:
            self.path.unlink(missing_ok=True)
            logger.debug(f"[{self.filename}] Cleaned up {self.path}")


async def ingest_csv_file(db: AsyncSession, path: Path, filename: str | None = None) -> IngestResult:
    return await CsvIngest(db, path, filename).run()
