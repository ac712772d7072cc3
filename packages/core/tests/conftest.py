"""packages/core 测试配置 -- 核心层 fixture"""

import pytest_asyncio


@pytest_asyncio.fixture
async def stores(db_conn):
    """提供 ProjectStore 和 TaskRecordStore 实例（共享同一连接）"""
    from offerhub.core.store import SqliteProjectStore, SqliteTaskRecordStore

    return SqliteProjectStore(db_conn), SqliteTaskRecordStore(db_conn), db_conn
