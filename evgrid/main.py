import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from evgrid.config import settings
from evgrid.db.database import Database
from evgrid.errors import EVGridError, InternalFailure
from evgrid.api.routes_vehicles import router as vehicles_router
from evgrid.api.routes_upload import router as upload_router
from evgrid.api.routes_health import router as health_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.database is None:
            app.state.database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
        await app.state.database.create_tables()
        logger.info("Vehicle store ready")
        yield
        await app.state.database.dispose()

    app = FastAPI(title="EV DataGrid", version="1.0.0", lifespan=lifespan)
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EVGridError)
    async def evgrid_error_handler(request: Request, exc: EVGridError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return await evgrid_error_handler(request, InternalFailure("Database operation failed"))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        tb = traceback.format_exc()
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}\n{tb}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # API routes
    app.include_router(health_router)
    app.include_router(vehicles_router)
    app.include_router(upload_router)

    return app


app = create_app()
