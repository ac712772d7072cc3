"""数据模型 -- TaskOutcome + RegistrationResult + RegistrationOutcome"""

from pydantic import BaseModel, ConfigDict, Field


class TaskOutcome(BaseModel):
    """提交到链上的任务结果"""

    project_id: str
    freelancer_id: str
    client_id: str
    completed: bool
    outcome_description: str = Field(default="", description="结果说明，缺省为空串")


class RegistrationResult(BaseModel):
    """链上登记结果

    Registrar 服务返回 camelCase 字段（transactionHash / taskId），
    通过 alias 兼容两种写法。
    """

    model_config = ConfigDict(populate_by_name=True)

    transaction_hash: str = Field(alias="transactionHash", min_length=1)
    task_id: str = Field(alias="taskId", min_length=1)


class RegistrationOutcome(BaseModel):
    """带重试的登记结果 -- 降级成功的显式表示

    - result 不为 None: 登记成功
    - result 为 None: 所有尝试均失败，error 给出最后一次失败原因
    """

    result: RegistrationResult | None = Field(default=None)
    attempts: int = Field(default=0, ge=0, description="实际尝试次数")
    error: str = Field(default="", description="最后一次失败的描述")

    @property
    def succeeded(self) -> bool:
        return self.result is not None
