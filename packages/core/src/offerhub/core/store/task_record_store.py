"""TaskRecordStore SQLite 实现

task_records 表：每个 project_id 至多一条（唯一索引），
评分字段通过条件 UPDATE 保证只写一次。
"""

from datetime import datetime
from typing import Any

import aiosqlite

from ..exceptions import DuplicateRecordError, StoreError
from ..models.task_record import TaskRecord

_COLUMNS = (
    "id, project_id, freelancer_id, client_id, completed, outcome_description, "
    "on_chain_tx_hash, on_chain_task_id, rating, rating_comment, created_at, updated_at"
)

# update_task_record 允许写入的列
_UPDATABLE_FIELDS = frozenset({"rating", "rating_comment", "updated_at"})


def _is_project_unique_conflict(error: Exception) -> bool:
    if not isinstance(error, aiosqlite.IntegrityError):
        return False
    text = str(error)
    return "idx_task_records_project_id" in text or "task_records.project_id" in text


class SqliteTaskRecordStore:
    """TaskRecordStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def insert_task_record(self, record: TaskRecord) -> TaskRecord:
        """插入 TaskRecord 并提交，返回已落盘的记录（提交后不再回读）

        Raises:
            DuplicateRecordError: 该 project_id 已存在 TaskRecord
            StoreError: 其他数据库失败
        """
        try:
            await self._conn.execute(
                f"""
                INSERT INTO task_records ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.project_id,
                    record.freelancer_id,
                    record.client_id,
                    int(record.completed),
                    record.outcome_description,
                    record.on_chain_tx_hash,
                    record.on_chain_task_id,
                    record.rating,
                    record.rating_comment,
                    record.created_at.isoformat(),
                    record.updated_at.isoformat(),
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            if _is_project_unique_conflict(e):
                raise DuplicateRecordError(
                    f"task record already exists for project {record.project_id}", e
                ) from e
            raise StoreError(f"failed to insert task record: {e}", e) from e

        return record

    async def get_task_record_by_id(self, record_id: str) -> TaskRecord | None:
        """根据 id 查询 TaskRecord"""
        return await self._fetch_one(
            f"SELECT {_COLUMNS} FROM task_records WHERE id = ?",
            (record_id,),
        )

    async def get_task_record_by_project_id(self, project_id: str) -> TaskRecord | None:
        """根据 project_id 查询 TaskRecord"""
        return await self._fetch_one(
            f"SELECT {_COLUMNS} FROM task_records WHERE project_id = ?",
            (project_id,),
        )

    async def update_task_record(
        self,
        record_id: str,
        fields: dict[str, Any],
        require_unrated: bool = False,
    ) -> TaskRecord | None:
        """更新 TaskRecord 指定字段

        Args:
            record_id: 记录 ID
            fields: 待更新字段（仅允许 rating / rating_comment / updated_at）
            require_unrated: True 时仅在 rating IS NULL 时更新

        Returns:
            更新后的记录；没有行被更新时返回 None
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields not updatable: {sorted(unknown)}")
        if not fields:
            return await self.get_task_record_by_id(record_id)

        columns = sorted(fields)
        assignments = ", ".join(f"{col} = ?" for col in columns)
        sql = f"UPDATE task_records SET {assignments} WHERE id = ?"
        if require_unrated:
            sql += " AND rating IS NULL"
        params = (*[fields[col] for col in columns], record_id)

        try:
            cursor = await self._conn.execute(sql, params)
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"failed to update task record: {e}", e) from e

        if cursor.rowcount == 0:
            return None
        return await self.get_task_record_by_id(record_id)

    async def list_task_records_by_client(self, client_id: str) -> list[TaskRecord]:
        """按 client 查询，created_at 倒序"""
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM task_records WHERE client_id = ? "
            "ORDER BY created_at DESC, id DESC",
            (client_id,),
        )

    async def list_task_records_by_freelancer(self, freelancer_id: str) -> list[TaskRecord]:
        """按 freelancer 查询，created_at 倒序"""
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM task_records WHERE freelancer_id = ? "
            "ORDER BY created_at DESC, id DESC",
            (freelancer_id,),
        )

    async def _fetch_one(self, sql: str, params: tuple) -> TaskRecord | None:
        try:
            cursor = await self._conn.execute(sql, params)
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"failed to query task record: {e}", e) from e
        if row is None:
            return None
        return self._row_to_record(row)

    async def _fetch_all(self, sql: str, params: tuple) -> list[TaskRecord]:
        try:
            cursor = await self._conn.execute(sql, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError(f"failed to list task records: {e}", e) from e
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> TaskRecord:
        """将数据库行转换为 TaskRecord 模型"""
        return TaskRecord(
            id=row[0],
            project_id=row[1],
            freelancer_id=row[2],
            client_id=row[3],
            completed=bool(row[4]),
            outcome_description=row[5],
            on_chain_tx_hash=row[6],
            on_chain_task_id=row[7],
            rating=row[8],
            rating_comment=row[9],
            created_at=datetime.fromisoformat(row[10]),
            updated_at=datetime.fromisoformat(row[11]),
        )
