"""Registrar 异常体系"""


class RegistrarError(Exception):
    """Registrar 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可能通过重试恢复（记录在 registrar_attempt_failed 日志中）
        """
        super().__init__(message)
        self.recoverable = recoverable


class RegistrarUnreachableError(RegistrarError):
    """Registrar 服务不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, registrar_url: str, original_error: Exception) -> None:
        """
        Args:
            registrar_url: 尝试连接的 Registrar 地址
            original_error: 原始异常
        """
        super().__init__(
            f"Registrar 不可达: {registrar_url} -- {original_error}",
            recoverable=True,
        )
        self.registrar_url = registrar_url
        self.original_error = original_error
