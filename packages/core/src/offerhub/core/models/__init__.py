"""Offer Hub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    TERMINAL_PROJECT_STATES,
    VALID_PROJECT_TRANSITIONS,
    ProjectStatus,
    outcome_status,
    validate_transition,
)
from .project import Project
from .task_record import CreateTaskRecordData, TaskRecord, UpdateTaskRatingData

__all__ = [
    # 枚举
    "ProjectStatus",
    # 状态机
    "VALID_PROJECT_TRANSITIONS",
    "TERMINAL_PROJECT_STATES",
    "validate_transition",
    "outcome_status",
    # Project
    "Project",
    # TaskRecord
    "TaskRecord",
    "CreateTaskRecordData",
    "UpdateTaskRatingData",
]
