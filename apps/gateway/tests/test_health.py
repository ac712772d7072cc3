"""健康检查接口测试"""

from unittest.mock import AsyncMock, MagicMock

import aiosqlite
from httpx import AsyncClient


class TestHealth:
    async def test_liveness(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    async def test_ready_core_profile(self, client: AsyncClient, mock_registrar):
        resp = await client.get("/ready")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["profile"] == "core"
        assert data["checks"]["sqlite"] == "ok"
        assert data["checks"]["journal_mode"] == "wal"
        assert data["checks"]["registrar"] == "skipped"
        mock_registrar.health_check.assert_not_called()

    async def test_ready_full_profile(self, client: AsyncClient, mock_registrar):
        resp = await client.get("/ready", params={"profile": "full"})

        assert resp.status_code == 200
        assert resp.json()["checks"]["registrar"] == "ok"
        mock_registrar.health_check.assert_called_once()

    async def test_unreachable_registrar_does_not_fail_readiness(
        self, client: AsyncClient, mock_registrar
    ):
        mock_registrar.health_check.return_value = False

        resp = await client.get("/ready", params={"profile": "full"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "ready"
        assert resp.json()["checks"]["registrar"] == "unreachable"

    async def test_store_failure_not_ready(self, client: AsyncClient, app):
        broken = MagicMock()
        broken.conn.execute = AsyncMock(side_effect=aiosqlite.OperationalError("locked"))
        app.state.store_group = broken

        resp = await client.get("/ready")

        assert resp.status_code == 503
        assert resp.json()["status"] == "not_ready"
        assert resp.json()["checks"]["sqlite"] == "error: OperationalError"
