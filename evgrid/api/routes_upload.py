import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from evgrid.config import settings
from evgrid.db.database import get_db
from evgrid.schemas.vehicle import UploadResponse
from evgrid.services.ingest import ingest_csv_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["csv-upload"])

CSV_CONTENT_TYPES = {"text/csv", "application/vnd.ms-excel"}
CHUNK_SIZE = 64 * 1024


def _is_csv(upload: UploadFile) -> bool:
    name_ok = (upload.filename or "").lower().endswith(".csv")
    type_ok = (upload.content_type or "").split(";")[0].strip().lower() in CSV_CONTENT_TYPES
    return name_ok or type_ok


async def _spool_to_disk(upload: UploadFile, max_bytes: int) -> Path:
    """Copy the upload into UPLOAD_DIR, enforcing the size limit while copying."""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{uuid.uuid4().hex}.csv"

    written = 0
    try:
        with open(path, "wb") as f:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise HTTPException(
                        status_code=400,
                        detail=f"File too large (limit {max_bytes // (1024 * 1024)} MB)",
                    )
                f.write(chunk)
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path


@router.post("/upload-csv", response_model=UploadResponse)
async def upload_csv(csv: UploadFile | None = File(None), db: AsyncSession = Depends(get_db)):
    if csv is None or not csv.filename:
        logger.info("CSV upload without a file")
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not _is_csv(csv):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    path = await _spool_to_disk(csv, settings.MAX_UPLOAD_BYTES)
    result = await ingest_csv_file(db, path, filename=csv.filename)
    return UploadResponse(message=result.message, count=result.count)
