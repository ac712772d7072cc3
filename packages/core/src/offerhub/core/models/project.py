"""Project Domain Model

projects 表由外部的项目管理逻辑创建和维护，
TaskRecord 生命周期只会把 in_progress 推进到 completed / cancelled。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ProjectStatus


class Project(BaseModel):
    """Project 数据模型"""

    id: str = Field(description="唯一标识")
    client_id: str = Field(description="项目所有者（client）ID")
    status: ProjectStatus = Field(default=ProjectStatus.DRAFT, description="当前状态")
    title: str = Field(default="", description="项目标题")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
