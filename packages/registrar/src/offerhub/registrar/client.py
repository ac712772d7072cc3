"""HttpRegistrarClient -- 链上登记服务 HTTP 调用封装

POST {base_url}/task-records，返回 {transactionHash, taskId}。
不做重试：重试策略由 RetryingRegistrar 提供。
"""

import time

import httpx
import pydantic
import structlog

from .exceptions import RegistrarError, RegistrarUnreachableError
from .models import RegistrationResult, TaskOutcome

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（触发 RegistrarUnreachableError）
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.TimeoutException,
)


class HttpRegistrarClient:
    """链上登记服务客户端"""

    def __init__(
        self,
        base_url: str = "http://localhost:8545",
        api_key: str = "",
        timeout_s: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """初始化 Registrar 客户端

        Args:
            base_url: Registrar 服务基础 URL
            api_key: 访问密钥，为空时不发送 Authorization 头
            timeout_s: 请求超时（秒）
            transport: 自定义 httpx transport（测试注入 MockTransport）
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout_s,
            transport=self._transport,
        )

    async def record(self, outcome: TaskOutcome) -> RegistrationResult:
        """提交任务结果到链上

        Args:
            outcome: 任务结果

        Returns:
            RegistrationResult，包含交易哈希与链上任务 ID

        Raises:
            RegistrarUnreachableError: 服务连接失败或超时
            RegistrarError: 服务返回错误或响应格式不合法
        """
        start_time = time.monotonic()
        try:
            async with self._client() as http_client:
                resp = await http_client.post("/task-records", json=outcome.model_dump())
        except Exception as e:
            if isinstance(e, _CONNECTION_ERROR_TYPES):
                raise RegistrarUnreachableError(self._base_url, e) from e
            raise RegistrarError(f"链上登记请求失败: {e}") from e

        duration_ms = int((time.monotonic() - start_time) * 1000)

        if resp.status_code >= 400:
            log.warning(
                "registrar_http_error",
                project_id=outcome.project_id,
                status_code=resp.status_code,
                duration_ms=duration_ms,
            )
            raise RegistrarError(
                f"链上登记失败: HTTP {resp.status_code}",
                recoverable=resp.status_code >= 500 or resp.status_code == 429,
            )

        try:
            result = RegistrationResult.model_validate(resp.json())
        except (ValueError, pydantic.ValidationError) as e:
            raise RegistrarError(f"链上登记响应格式不合法: {e}", recoverable=False) from e

        log.info(
            "registrar_record_completed",
            project_id=outcome.project_id,
            transaction_hash=result.transaction_hash,
            duration_ms=duration_ms,
        )
        return result

    async def health_check(self) -> bool:
        """检查 Registrar 服务可达性

        发送 GET {base_url}/health 请求。

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self._base_url}/health"
        try:
            async with httpx.AsyncClient(transport=self._transport) as http_client:
                resp = await http_client.get(url, timeout=HEALTH_CHECK_TIMEOUT_S)
                return resp.status_code == 200
        except Exception as e:
            log.debug("registrar_health_check_failed", url=url, error=str(e))
            return False
