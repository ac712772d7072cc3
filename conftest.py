"""全局 pytest 配置 -- 临时 SQLite 数据库 + 测试数据 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from offerhub.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


def _make_project(
    project_id: str = "P1",
    client_id: str = "C1",
    status: str = "in_progress",
    title: str = "Landing page",
):
    """构造测试用 Project"""
    from offerhub.core.models import Project, ProjectStatus

    now = datetime.now(UTC)
    return Project(
        id=project_id,
        client_id=client_id,
        status=ProjectStatus(status),
        title=title,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def make_project():
    """Project 工厂 fixture"""
    return _make_project
