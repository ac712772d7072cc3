"""SQLite 数据库初始化

PRAGMA 配置 + 两张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

from ..config import RATING_MAX, RATING_MIN

# projects 表 DDL
_PROJECTS_DDL = """
CREATE TABLE IF NOT EXISTS projects (
    id          TEXT PRIMARY KEY,
    client_id   TEXT NOT NULL,
    status      TEXT NOT NULL DEFAULT 'draft',
    title       TEXT NOT NULL DEFAULT '',
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

_PROJECTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_projects_client_id ON projects(client_id);",
    "CREATE INDEX IF NOT EXISTS idx_projects_status ON projects(status);",
]

# task_records 表 DDL
_TASK_RECORDS_DDL = f"""
CREATE TABLE IF NOT EXISTS task_records (
    id                   TEXT PRIMARY KEY,
    project_id           TEXT NOT NULL,
    freelancer_id        TEXT NOT NULL,
    client_id            TEXT NOT NULL,
    completed            INTEGER NOT NULL,
    outcome_description  TEXT,
    on_chain_tx_hash     TEXT,
    on_chain_task_id     TEXT,
    rating               INTEGER
        CHECK (rating IS NULL OR rating BETWEEN {RATING_MIN} AND {RATING_MAX}),
    rating_comment       TEXT,
    created_at           TEXT NOT NULL,
    updated_at           TEXT NOT NULL,

    FOREIGN KEY (project_id) REFERENCES projects(id)
);
"""

_TASK_RECORDS_INDEXES = [
    # 每个项目至多一条 TaskRecord（关闭 check-then-insert 的竞态窗口）
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_task_records_project_id "
        "ON task_records(project_id);"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_task_records_client_created "
        "ON task_records(client_id, created_at DESC);"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_task_records_freelancer_created "
        "ON task_records(freelancer_id, created_at DESC);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_PROJECTS_DDL)
    await conn.execute(_TASK_RECORDS_DDL)

    for idx_sql in _PROJECTS_INDEXES + _TASK_RECORDS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
