"""TaskRecord Domain Model

TaskRecord 是自由职业任务结果的持久化声明：
- 同一 project_id 至多一条
- rating 只能写入一次，且仅 completed=True 的记录可评分
- 链上字段（on_chain_*）可能为空：区块链登记是尽力而为的
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..config import RATING_MAX, RATING_MIN


class TaskRecord(BaseModel):
    """TaskRecord 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    project_id: str = Field(description="关联的 Project ID（一对一）")
    freelancer_id: str = Field(description="完成任务的 freelancer ID")
    client_id: str = Field(description="项目 client ID")
    completed: bool = Field(description="任务是否完成")
    outcome_description: str | None = Field(default=None, description="结果说明")
    on_chain_tx_hash: str | None = Field(default=None, description="链上交易哈希")
    on_chain_task_id: str | None = Field(default=None, description="链上任务 ID")
    rating: int | None = Field(default=None, description="评分，写入后不可修改")
    rating_comment: str | None = Field(default=None, description="评分评语")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @property
    def is_rated(self) -> bool:
        return self.rating is not None


class CreateTaskRecordData(BaseModel):
    """创建 TaskRecord 的输入"""

    project_id: str = Field(min_length=1, description="项目 ID")
    freelancer_id: str = Field(min_length=1, description="freelancer ID")
    completed: bool = Field(description="任务是否完成")
    outcome_description: str | None = Field(default=None, description="结果说明")


class UpdateTaskRatingData(BaseModel):
    """评分输入

    comment 区分三种情况：未提供（不改动）、提供空白或 null（写入 null）、
    提供非空文本（写入 trim 后的值）。是否提供通过 model_fields_set 判断。
    """

    rating: int = Field(ge=RATING_MIN, le=RATING_MAX, description="评分")
    comment: str | None = Field(default=None, description="评语")

    @property
    def comment_provided(self) -> bool:
        return "comment" in self.model_fields_set

    def normalized_comment(self) -> str | None:
        """trim 后的评语，空白视为 None"""
        if self.comment is None:
            return None
        trimmed = self.comment.strip()
        return trimmed or None
