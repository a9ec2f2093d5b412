"""
Tagboard Backend - Health and Middleware Tests
===============================================
"""

import logging
from unittest.mock import MagicMock

import pytest

from tagboard import __version__, database
from tagboard.config import Settings


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_connected_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_health_reports_unreachable_database(self, test_client, monkeypatch):
        broken = MagicMock()
        broken.connect.side_effect = OSError("connection refused")
        monkeypatch.setattr(database, "engine", broken)

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_request_id_header(self, test_client):
        response = await test_client.get("/api/tags")

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_api_request_logged_health_skipped(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="tagboard.access")

        await test_client.get("/health")
        await test_client.get("/api/tags")

        paths = [r.path for r in caplog.records if r.name == "tagboard.access"]
        assert paths == ["/api/tags"]


class TestSettings:

    def test_log_level_is_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(log_level="chatty")

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(database_url="sqlite+aiosqlite:///:memory:").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite
