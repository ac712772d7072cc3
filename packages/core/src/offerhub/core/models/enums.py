"""枚举定义 -- ProjectStatus 状态机

包含 ProjectStatus 枚举，以及 VALID_PROJECT_TRANSITIONS 合法流转映射
和 TERMINAL_PROJECT_STATES 终态集合。
"""

from enum import StrEnum


class ProjectStatus(StrEnum):
    """Project 状态机"""

    DRAFT = "draft"
    OPEN = "open"
    IN_PROGRESS = "in_progress"

    # 终态
    COMPLETED = "completed"
    CANCELLED = "cancelled"


VALID_PROJECT_TRANSITIONS: dict[ProjectStatus, set[ProjectStatus]] = {
    ProjectStatus.DRAFT: {ProjectStatus.OPEN, ProjectStatus.CANCELLED},
    ProjectStatus.OPEN: {ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED},
    # 仅 in_progress 可以接收 TaskRecord，并由此流转到终态
    ProjectStatus.IN_PROGRESS: {ProjectStatus.COMPLETED, ProjectStatus.CANCELLED},
    ProjectStatus.COMPLETED: set(),
    ProjectStatus.CANCELLED: set(),
}

TERMINAL_PROJECT_STATES: set[ProjectStatus] = {
    ProjectStatus.COMPLETED,
    ProjectStatus.CANCELLED,
}


def validate_transition(from_status: ProjectStatus, to_status: ProjectStatus) -> bool:
    """验证项目状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_PROJECT_TRANSITIONS.get(from_status, set())
    return to_status in allowed


def outcome_status(completed: bool) -> ProjectStatus:
    """任务结果对应的项目终态"""
    return ProjectStatus.COMPLETED if completed else ProjectStatus.CANCELLED
