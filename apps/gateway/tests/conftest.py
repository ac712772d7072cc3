"""apps/gateway 测试配置 -- FastAPI app + Store + Mock registrar fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def store_group(tmp_path: Path):
    """已初始化的 StoreGroup（临时数据库）"""
    from offerhub.core.store import create_store_group

    group = await create_store_group(str(tmp_path / "sqlite" / "test.db"))
    yield group
    await group.conn.close()


@pytest.fixture
def registration_result():
    from offerhub.registrar.models import RegistrationResult

    return RegistrationResult(transaction_hash="0xabc123", task_id="chain-42")


@pytest.fixture
def mock_registrar(registration_result):
    """Mock HttpRegistrarClient，默认登记成功"""
    registrar = AsyncMock()
    registrar.record = AsyncMock(return_value=registration_result)
    registrar.health_check = AsyncMock(return_value=True)
    return registrar


@pytest.fixture
def fake_sleep():
    """记录等待时长的假时钟"""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep


@pytest.fixture
def service(store_group, mock_registrar, fake_sleep):
    """TaskRecordService（Mock registrar + 假时钟）"""
    from offerhub.gateway.services.task_record_service import TaskRecordService

    return TaskRecordService(store_group, mock_registrar, sleep=fake_sleep)


@pytest.fixture
def seed_project(store_group, make_project):
    """向 projects 表写入一个项目"""

    async def _seed(**kwargs):
        project = make_project(**kwargs)
        await store_group.project_store.create_project(project)
        return project

    return _seed


@pytest_asyncio.fixture
async def app(store_group, mock_registrar):
    """创建测试用 FastAPI app 实例（手动初始化 state，绕过 lifespan）"""
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from offerhub.gateway.main import create_app
    from offerhub.registrar.config import RegistrarConfig

    application = create_app()
    application.state.store_group = store_group
    application.state.registrar = mock_registrar
    # 退避底数为 0，失败重试不真正等待
    application.state.registrar_config = RegistrarConfig(backoff_base_s=0)

    yield application

    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
