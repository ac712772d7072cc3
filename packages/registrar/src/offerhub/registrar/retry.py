"""RetryingRegistrar -- 带指数退避的有界重试

链上登记是软依赖：所有尝试失败时返回 result=None 的 RegistrationOutcome，
而不是抛出异常，由调用方决定如何降级。

退避：第 n 次失败后等待 backoff_base_s ** n 秒（默认 2s、4s），
最后一次失败后不再等待。
"""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from .models import RegistrationOutcome, TaskOutcome

log = structlog.get_logger()

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE_S = 2.0


class RetryingRegistrar:
    """为任意 registrar（具备 async record(outcome)）提供重试"""

    def __init__(
        self,
        registrar,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base_s: float = DEFAULT_BACKOFF_BASE_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            registrar: HttpRegistrarClient / EchoRegistrar 等
            max_attempts: 总尝试次数（含首次）
            backoff_base_s: 退避底数
            sleep: 等待函数，测试时注入假时钟
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._registrar = registrar
        self._max_attempts = max_attempts
        self._backoff_base_s = backoff_base_s
        self._sleep = sleep

    @property
    def registrar(self):
        return self._registrar

    def backoff_delay(self, attempt: int) -> float:
        """第 attempt 次失败后的等待秒数"""
        return self._backoff_base_s**attempt

    async def record_with_retry(self, outcome: TaskOutcome) -> RegistrationOutcome:
        """提交任务结果，失败时按指数退避重试

        Returns:
            RegistrationOutcome
            - 成功: result 为登记结果
            - 全部失败: result=None，error 为最后一次失败描述
        """
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                result = await self._registrar.record(outcome)
                return RegistrationOutcome(result=result, attempts=attempt)
            except Exception as e:
                last_error = e
                log.warning(
                    "registrar_attempt_failed",
                    project_id=outcome.project_id,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error_type=type(e).__name__,
                    error=str(e),
                    recoverable=getattr(e, "recoverable", None),
                )

            if attempt < self._max_attempts:
                await self._sleep(self.backoff_delay(attempt))

        log.error(
            "registrar_registration_abandoned",
            project_id=outcome.project_id,
            attempts=self._max_attempts,
            error_type=type(last_error).__name__,
        )
        return RegistrationOutcome(
            result=None,
            attempts=self._max_attempts,
            error=f"{type(last_error).__name__}: {last_error}",
        )
