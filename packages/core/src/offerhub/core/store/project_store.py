"""ProjectStore SQLite 实现

projects 由外部项目管理逻辑维护，此处仅提供 TaskRecord 生命周期
需要的点查询与条件状态更新（create_project 供初始化与测试使用）。
"""

from datetime import datetime

import aiosqlite

from ..exceptions import StoreError
from ..models.enums import ProjectStatus
from ..models.project import Project


class SqliteProjectStore:
    """ProjectStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_project(self, project: Project) -> None:
        """创建项目记录并提交"""
        try:
            await self._conn.execute(
                """
                INSERT INTO projects (id, client_id, status, title, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    project.id,
                    project.client_id,
                    project.status.value,
                    project.title,
                    project.created_at.isoformat(),
                    project.updated_at.isoformat(),
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"failed to create project: {e}", e) from e

    async def get_project(self, project_id: str) -> Project | None:
        """根据 id 查询项目"""
        try:
            cursor = await self._conn.execute(
                "SELECT id, client_id, status, title, created_at, updated_at "
                "FROM projects WHERE id = ?",
                (project_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"failed to query project: {e}", e) from e
        if row is None:
            return None
        return self._row_to_project(row)

    async def update_project_status(
        self,
        project_id: str,
        status: ProjectStatus,
        updated_at: str,
        expected_status: ProjectStatus | None = None,
    ) -> bool:
        """更新项目状态

        expected_status 不为 None 时仅在当前状态匹配时更新。

        Returns:
            True 如果有行被更新
        """
        if expected_status is None:
            sql = "UPDATE projects SET status = ?, updated_at = ? WHERE id = ?"
            params: tuple = (status.value, updated_at, project_id)
        else:
            sql = (
                "UPDATE projects SET status = ?, updated_at = ? "
                "WHERE id = ? AND status = ?"
            )
            params = (status.value, updated_at, project_id, expected_status.value)

        try:
            cursor = await self._conn.execute(sql, params)
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"failed to update project status: {e}", e) from e
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_project(row: aiosqlite.Row) -> Project:
        """将数据库行转换为 Project 模型"""
        return Project(
            id=row[0],
            client_id=row[1],
            status=ProjectStatus(row[2]),
            title=row[3],
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )
