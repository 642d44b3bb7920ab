"""
Unit tests for app.main module and error handlers.
"""
import json
import pytest
from unittest.mock import Mock, patch
from fastapi import FastAPI, Request
from sqlalchemy.exc import ProgrammingError, OperationalError, IntegrityError
from app.core.errors import InvalidEmotion, ModelBuildError, NoDataError
from app.main import create_app
from app.services.model import NullSummaryModel


class TestCreateApp:
    """Test create_app function."""

    def test_create_app_returns_fastapi_instance(self):
        """Test that create_app returns a FastAPI instance."""
        app = create_app()

        assert isinstance(app, FastAPI)
        assert app.title == "MoodWeek API"

    def test_app_has_cors_middleware(self):
        """Test that CORS middleware is configured."""
        app = create_app()
        assert hasattr(app, 'user_middleware')

    def test_app_includes_all_routers(self):
        """Test that all routers are included."""
        app = create_app()
        route_paths = app.openapi()["paths"]

        assert "/health" in route_paths
        assert "/health/full" in route_paths
        assert "/api/checkins" in route_paths
        assert "/api/checkins/{checkin_id}" in route_paths
        assert "/api/analyses/weekly" in route_paths
        assert "/api/analyses/{analysis_id}" in route_paths

    def test_summary_model_built_from_settings(self):
        """Test the configured backend is loaded into app state."""
        app = create_app()
        assert isinstance(app.state.summary_model, NullSummaryModel)

    def test_injected_model_and_rng(self, stub_model_factory, seeded_rng):
        """Test a model and random source can be injected."""
        model = stub_model_factory()
        app = create_app(summary_model=model, rng=seeded_rng)

        assert app.state.summary_model is model
        assert app.state.rng is seeded_rng

    def test_model_build_failure_stops_startup(self):
        """Test a broken model configuration prevents the app from being built."""
        with patch("app.main.build_summary_model", side_effect=ModelBuildError("bad training data")):
            with pytest.raises(ModelBuildError):
                create_app()


class TestExceptionHandlers:
    """Test exception handlers."""

    @pytest.mark.asyncio
    async def test_exception_handlers_registered(self):
        """Test that exception handlers are registered."""
        app = create_app()

        assert InvalidEmotion in app.exception_handlers
        assert NoDataError in app.exception_handlers
        assert ProgrammingError in app.exception_handlers
        assert OperationalError in app.exception_handlers
        assert IntegrityError in app.exception_handlers

    @pytest.mark.asyncio
    async def test_invalid_emotion_handler(self):
        """Test InvalidEmotion maps to 400 with the accepted values."""
        app = create_app()
        handler = app.exception_handlers[InvalidEmotion]

        response = await handler(Mock(spec=Request), InvalidEmotion("joyful", "Happy, Calm"))

        assert response.status_code == 400
        body = json.loads(response.body)
        assert body["error_code"] == "INVALID_EMOTION"
        assert "joyful" in body["detail"]

    @pytest.mark.asyncio
    async def test_no_data_handler(self):
        """Test NoDataError maps to 409."""
        app = create_app()
        handler = app.exception_handlers[NoDataError]

        response = await handler(Mock(spec=Request), NoDataError())

        assert response.status_code == 409
        assert json.loads(response.body)["error_code"] == "NO_DATA"

    @pytest.mark.asyncio
    async def test_programming_error_schema_mismatch(self):
        """Test ProgrammingError handler for schema mismatch."""
        app = create_app()
        handler = app.exception_handlers[ProgrammingError]

        exc = ProgrammingError("column does not exist", None, None)
        response = await handler(Mock(spec=Request), exc)

        assert response.status_code == 503
        assert "SCHEMA_MISMATCH" in response.body.decode()

    @pytest.mark.asyncio
    async def test_programming_error_generic(self):
        """Test ProgrammingError handler for generic errors."""
        app = create_app()
        handler = app.exception_handlers[ProgrammingError]

        response = await handler(Mock(spec=Request), ProgrammingError("some other error", None, None))

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_operational_error_handler(self):
        """Test OperationalError handler."""
        app = create_app()
        handler = app.exception_handlers[OperationalError]

        response = await handler(Mock(spec=Request), OperationalError("connection failed", None, None))

        assert response.status_code == 503
        assert "DATABASE_CONNECTION_ERROR" in response.body.decode()

    @pytest.mark.asyncio
    async def test_integrity_error_handler(self):
        """Test IntegrityError handler."""
        app = create_app()
        handler = app.exception_handlers[IntegrityError]

        response = await handler(Mock(spec=Request), IntegrityError("constraint violation", None, None))

        assert response.status_code == 400
        assert "DATA_INTEGRITY_ERROR" in response.body.decode()


class TestAppModule:
    """Test app module level."""

    def test_app_instance_created(self):
        """Test that app instance is created at module level."""
        from app.main import app
        assert isinstance(app, FastAPI)

    def test_app_configuration(self):
        """Test app is properly configured."""
        from app.main import app
        from app.core.config import settings

        assert app.title == settings.APP_NAME
