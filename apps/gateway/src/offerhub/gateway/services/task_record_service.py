"""TaskRecordService -- TaskRecord 创建/查询/评分业务逻辑

创建流程（严格按序执行，前一步失败则后续步骤不执行）：
1. 校验项目存在、处于 in_progress、请求者为项目 client
2. 校验该项目尚无 TaskRecord
3. 链上登记（有界重试，全部失败时降级为无链上字段）
4. 写入 TaskRecord
5. 推进项目状态到 completed / cancelled（失败仅记录，不影响结果）

两个软失败步骤（链上登记、项目状态更新）的诊断信息通过
TaskRecordResult.warnings 返回，而不是在内部吞掉。
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog
from offerhub.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateRecordError,
    InternalError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from offerhub.core.models import (
    CreateTaskRecordData,
    ProjectStatus,
    TaskRecord,
    UpdateTaskRatingData,
    outcome_status,
)
from offerhub.core.store import StoreGroup
from offerhub.registrar import RetryingRegistrar, TaskOutcome
from offerhub.registrar.retry import DEFAULT_BACKOFF_BASE_S, DEFAULT_MAX_ATTEMPTS
from pydantic import BaseModel, Field
from ulid import ULID

log = structlog.get_logger()


class TaskRecordResult(BaseModel):
    """创建结果：TaskRecord + 降级诊断"""

    record: TaskRecord
    warnings: list[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


class TaskRecordService:
    """TaskRecord 业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        registrar,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base_s: float = DEFAULT_BACKOFF_BASE_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            store_group: Store 实例组
            registrar: 具备 async record(outcome) 的链上登记客户端
            max_attempts: 链上登记总尝试次数
            backoff_base_s: 指数退避底数（秒）
            sleep: 退避等待函数，测试时注入假时钟
        """
        self._stores = store_group
        self._registrar = RetryingRegistrar(
            registrar,
            max_attempts=max_attempts,
            backoff_base_s=backoff_base_s,
            sleep=sleep,
        )

    async def create_task_record(
        self,
        data: CreateTaskRecordData,
        requester_id: str,
    ) -> TaskRecordResult:
        """创建 TaskRecord 并登记上链

        Args:
            data: 创建输入
            requester_id: 请求者 ID，必须为项目 client

        Returns:
            TaskRecordResult

        Raises:
            NotFoundError: 项目不存在
            ValidationError: 项目不在 in_progress 状态
            AuthorizationError: 请求者不是项目 client
            ConflictError: 该项目已存在 TaskRecord
            InternalError: Store 失败
        """
        project_id = data.project_id
        project = await self._call_store(
            "get_project", self._stores.project_store.get_project(project_id)
        )
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")

        if project.status != ProjectStatus.IN_PROGRESS:
            raise ValidationError(
                "Project must be in 'in_progress' status to record task outcome. "
                f"Current status: {project.status.value}"
            )

        if project.client_id != requester_id:
            raise AuthorizationError("Only the project client can record task outcomes")

        existing = await self._call_store(
            "get_task_record_by_project_id",
            self._stores.task_record_store.get_task_record_by_project_id(project_id),
        )
        if existing is not None:
            raise ConflictError(f"Task record already exists for project {project_id}")

        warnings: list[str] = []

        registration = await self._registrar.record_with_retry(
            TaskOutcome(
                project_id=project_id,
                freelancer_id=data.freelancer_id,
                client_id=requester_id,
                completed=data.completed,
                outcome_description=data.outcome_description or "",
            )
        )
        if not registration.succeeded:
            log.error(
                "blockchain_registration_skipped",
                project_id=project_id,
                attempts=registration.attempts,
            )
            warnings.append(
                f"Blockchain registration failed after {registration.attempts} attempts; "
                "task record stored without on-chain reference"
            )

        now = datetime.now(UTC)
        record = TaskRecord(
            id=str(ULID()),
            project_id=project_id,
            freelancer_id=data.freelancer_id,
            client_id=requester_id,
            completed=data.completed,
            outcome_description=data.outcome_description,
            on_chain_tx_hash=(
                registration.result.transaction_hash if registration.result else None
            ),
            on_chain_task_id=registration.result.task_id if registration.result else None,
            created_at=now,
            updated_at=now,
        )

        try:
            stored = await self._stores.task_record_store.insert_task_record(record)
        except DuplicateRecordError as e:
            # 并发创建：唯一索引拦截了第二条记录
            log.warning("task_record_insert_conflict", project_id=project_id)
            raise ConflictError(
                f"Task record already exists for project {project_id}"
            ) from e
        except StoreError as e:
            log.error(
                "task_record_insert_failed",
                project_id=project_id,
                error_type=type(e.original_error or e).__name__,
            )
            raise InternalError("Failed to create task record") from e

        log.info(
            "task_record_created",
            record_id=stored.id,
            project_id=project_id,
            completed=stored.completed,
            on_chain=stored.on_chain_tx_hash is not None,
        )

        warning = await self._finalize_project(project_id, data.completed)
        if warning:
            warnings.append(warning)

        return TaskRecordResult(record=stored, warnings=warnings)

    async def _finalize_project(self, project_id: str, completed: bool) -> str | None:
        """推进项目到终态（尽力而为）

        Returns:
            失败时的警告文本，成功返回 None
        """
        new_status = outcome_status(completed)
        try:
            updated = await self._stores.project_store.update_project_status(
                project_id,
                new_status,
                datetime.now(UTC).isoformat(),
                expected_status=ProjectStatus.IN_PROGRESS,
            )
        except StoreError as e:
            log.error(
                "project_status_update_failed",
                project_id=project_id,
                target_status=new_status.value,
                error_type=type(e.original_error or e).__name__,
            )
            return f"Failed to update project status to '{new_status.value}'"

        if not updated:
            log.warning(
                "project_status_changed_concurrently",
                project_id=project_id,
                target_status=new_status.value,
            )
            return (
                f"Project status was not updated to '{new_status.value}': "
                "project is no longer in_progress"
            )
        return None

    async def get_task_record_by_project_id(self, project_id: str) -> TaskRecord | None:
        """查询项目的 TaskRecord，不存在返回 None"""
        return await self._call_store(
            "get_task_record_by_project_id",
            self._stores.task_record_store.get_task_record_by_project_id(project_id),
        )

    async def get_task_records_by_client_id(self, client_id: str) -> list[TaskRecord]:
        """查询 client 的全部 TaskRecord，最新在前"""
        return await self._call_store(
            "list_task_records_by_client",
            self._stores.task_record_store.list_task_records_by_client(client_id),
        )

    async def get_task_records_by_freelancer_id(self, freelancer_id: str) -> list[TaskRecord]:
        """查询 freelancer 的全部 TaskRecord，最新在前"""
        return await self._call_store(
            "list_task_records_by_freelancer",
            self._stores.task_record_store.list_task_records_by_freelancer(freelancer_id),
        )

    async def update_task_rating(
        self,
        record_id: str,
        data: UpdateTaskRatingData,
        requester_id: str,
    ) -> TaskRecord:
        """为已完成的任务评分（只能评一次）

        Raises:
            NotFoundError: 记录不存在
            AuthorizationError: 请求者不是记录 client
            ConflictError: 已评分
            ValidationError: 任务未完成
            InternalError: Store 失败
        """
        record = await self._call_store(
            "get_task_record_by_id",
            self._stores.task_record_store.get_task_record_by_id(record_id),
        )
        if record is None:
            raise NotFoundError(f"Task record {record_id} not found")

        if record.client_id != requester_id:
            raise AuthorizationError("Only the project client can rate the task")

        if record.is_rated:
            raise ConflictError("Rating has already been set and cannot be changed")

        if not record.completed:
            raise ValidationError("Only completed tasks can be rated")

        fields: dict = {
            "rating": data.rating,
            "updated_at": datetime.now(UTC).isoformat(),
        }
        if data.comment_provided:
            fields["rating_comment"] = data.normalized_comment()

        updated = await self._call_store(
            "update_task_record",
            self._stores.task_record_store.update_task_record(
                record_id, fields, require_unrated=True
            ),
        )
        if updated is None:
            # 并发评分：条件更新未命中
            raise ConflictError("Rating has already been set and cannot be changed")

        log.info("task_record_rated", record_id=record_id, rating=data.rating)
        return updated

    @staticmethod
    async def _call_store(operation: str, awaitable):
        """执行 Store 调用，StoreError 转为 InternalError"""
        try:
            return await awaitable
        except StoreError as e:
            log.error(
                "store_operation_failed",
                operation=operation,
                error_type=type(e.original_error or e).__name__,
            )
            raise InternalError(f"Database error during {operation}") from e
