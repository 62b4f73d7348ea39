"""Tests for the health check endpoints."""

from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from ragchat.api.deps import get_service_cache


def _cache_with_session(session: MagicMock | None) -> MagicMock:
    cache = MagicMock()
    if session is None:
        cache.session_factory = None
    else:
        cache.session_factory.return_value.__aenter__.return_value = session
    return cache


class TestHealthRoutes:
    """Tests for /api/v1/health."""

    def test_health_check(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Server Healthy"}

    def test_correlation_id_is_echoed(self, client) -> None:
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_db_health_without_store_is_degraded(self, app, client) -> None:
        app.dependency_overrides[get_service_cache] = lambda: _cache_with_session(None)

        response = client.get("/api/v1/health/db")

        assert response.json()["status"] == "degraded"

    def test_db_health_ok(self, app, client) -> None:
        session = MagicMock()
        session.execute = AsyncMock()
        app.dependency_overrides[get_service_cache] = lambda: _cache_with_session(session)

        response = client.get("/api/v1/health/db")

        assert response.json() == {"status": "healthy", "message": "Database connection OK"}
        session.execute.assert_awaited_once()

    def test_db_health_failure_is_unhealthy(self, app, client) -> None:
        session = MagicMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("refused")))
        app.dependency_overrides[get_service_cache] = lambda: _cache_with_session(session)

        response = client.get("/api/v1/health/db")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"
