"""
FastAPI application for the BioTutor backend.

Run with ``uvicorn biotutor.main:app``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from biotutor.core.config import settings
from biotutor.core.database import DatabaseManager, check_database_connection
from biotutor.core.errors import BioTutorError
from biotutor.core.logging_config import configure_logging
from biotutor.core.session import SessionGuardMiddleware
from biotutor.routers import api_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    DatabaseManager.create_all_tables()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"},
    )


async def domain_exception_handler(request: Request, exc: BioTutorError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        lifespan=lifespan,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BioTutorError, domain_exception_handler)

    app.add_middleware(SessionGuardMiddleware)
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["health"])
    def health() -> dict:
        return {
            "status": "ok",
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "database": "connected" if check_database_connection() else "unavailable",
        }

    return app


app = create_app()
