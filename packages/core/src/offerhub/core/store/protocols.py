"""Store Protocol 接口定义

定义 ProjectStore、TaskRecordStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。

约定：
- 点查询查无此行时返回 None，不抛异常
- 其余失败一律抛出 StoreError（唯一约束冲突为 DuplicateRecordError）
"""

from typing import Any, Protocol

from ..models.enums import ProjectStatus
from ..models.project import Project
from ..models.task_record import TaskRecord


class ProjectStore(Protocol):
    """Project 存储接口"""

    async def create_project(self, project: Project) -> None:
        """创建项目记录"""
        ...

    async def get_project(self, project_id: str) -> Project | None:
        """根据 id 查询项目"""
        ...

    async def update_project_status(
        self,
        project_id: str,
        status: ProjectStatus,
        updated_at: str,
        expected_status: ProjectStatus | None = None,
    ) -> bool:
        """条件更新项目状态，返回是否有行被更新"""
        ...


class TaskRecordStore(Protocol):
    """TaskRecord 存储接口"""

    async def insert_task_record(self, record: TaskRecord) -> TaskRecord:
        """插入 TaskRecord 并返回落盘后的记录"""
        ...

    async def get_task_record_by_id(self, record_id: str) -> TaskRecord | None:
        """根据 id 查询 TaskRecord"""
        ...

    async def get_task_record_by_project_id(self, project_id: str) -> TaskRecord | None:
        """根据 project_id 查询 TaskRecord"""
        ...

    async def update_task_record(
        self,
        record_id: str,
        fields: dict[str, Any],
        require_unrated: bool = False,
    ) -> TaskRecord | None:
        """条件更新 TaskRecord，条件不满足时返回 None"""
        ...

    async def list_task_records_by_client(self, client_id: str) -> list[TaskRecord]:
        """按 client 查询，created_at 倒序"""
        ...

    async def list_task_records_by_freelancer(self, freelancer_id: str) -> list[TaskRecord]:
        """按 freelancer 查询，created_at 倒序"""
        ...
