from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import ProgrammingError, OperationalError, IntegrityError
from app.core.config import settings
from app.core.errors import InvalidEmotion, NoDataError
from app.core.logging import configure_logging
from app.api.routes import health, checkins, analyses
from app.services.model import build_summary_model, describe
import logging

def create_app(summary_model=None, rng=None) -> FastAPI:
    configure_logging()
    logger = logging.getLogger(__name__)

    # Built before serving; a training failure stops startup.
    if summary_model is None:
        summary_model = build_summary_model(settings)
    logger.info("Summary model ready: %s", describe(summary_model))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.DB_AUTO_CREATE:
            from app.db.init_db import init_db
            await init_db()
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.summary_model = summary_model
    app.state.rng = rng

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(InvalidEmotion)
    async def invalid_emotion_handler(request: Request, exc: InvalidEmotion):
        logger.warning("Rejected emotion value: %s", exc.raw)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid emotion",
                "detail": str(exc),
                "error_code": "INVALID_EMOTION"
            }
        )

    @app.exception_handler(NoDataError)
    async def no_data_handler(request: Request, exc: NoDataError):
        logger.warning("Weekly analysis rejected: %s", exc)
        return JSONResponse(
            status_code=409,
            content={
                "error": "No data to analyze",
                "detail": str(exc),
                "error_code": "NO_DATA"
            }
        )

    @app.exception_handler(ProgrammingError)
    async def programming_error_handler(request: Request, exc: ProgrammingError):
        logger.error(f"Database programming error: {exc}")
        # Check if it's a column not found error
        if "does not exist" in str(exc):
            return JSONResponse(
                status_code=503,  # Service Unavailable
                content={
                    "error": "Database schema mismatch detected",
                    "detail": "The application schema is out of sync with the database. Please contact support.",
                    "error_code": "SCHEMA_MISMATCH"
                }
            )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Database query error",
                "detail": "There was an error executing the database query",
                "error_code": "DATABASE_ERROR"
            }
        )

    @app.exception_handler(OperationalError)
    async def operational_error_handler(request: Request, exc: OperationalError):
        logger.error(f"Database operational error: {exc}")
        return JSONResponse(
            status_code=503,
            content={
                "error": "Database connection error",
                "detail": "Unable to connect to the database. Please try again later.",
                "error_code": "DATABASE_CONNECTION_ERROR"
            }
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.error(f"Database integrity error: {exc}")
        return JSONResponse(
            status_code=400,
            content={
                "error": "Data integrity violation",
                "detail": "The operation violates database constraints",
                "error_code": "DATA_INTEGRITY_ERROR"
            }
        )

    # routes
    app.include_router(health.router)
    app.include_router(checkins.router)
    app.include_router(analyses.router)
    return app

app = create_app()
