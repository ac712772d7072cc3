"""领域异常体系

两层异常：
- AppError 家族：业务错误，原样抛给调用方，由 gateway 翻译为 HTTP 响应
- StoreError 家族：持久化边界错误，仅在 Store 与 Service 之间传递

"查无此行"不是错误，Store 以 None 表示，不会抛出 StoreError。
"""


class AppError(Exception):
    """业务异常基类"""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """引用的 Project 或 TaskRecord 不存在"""

    code = "NOT_FOUND"
    status_code = 404


class ValidationError(AppError):
    """请求违反领域状态前置条件（项目状态不符、对未完成任务评分等）"""

    code = "VALIDATION_ERROR"
    status_code = 422


class AuthorizationError(AppError):
    """请求者不是有权操作的 client"""

    code = "FORBIDDEN"
    status_code = 403


class ConflictError(AppError):
    """重复的 TaskRecord，或对已评分记录再次评分"""

    code = "CONFLICT"
    status_code = 409


class InternalError(AppError):
    """Store 返回了非预期的失败"""

    code = "INTERNAL_ERROR"
    status_code = 500


class StoreError(Exception):
    """Store 层失败（连接、SQL、约束等）"""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class DuplicateRecordError(StoreError):
    """唯一约束冲突（同一 project_id 已存在 TaskRecord）"""
