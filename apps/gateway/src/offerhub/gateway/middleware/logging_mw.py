"""LoggingMiddleware -- 请求级日志

每个请求绑定 request_id（上游 X-Request-ID 优先，否则生成 ULID）与
请求者 ID，记录开始、完成与未处理异常，并回写 X-Request-ID 响应头。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

log = structlog.get_logger()


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(ULID())

        structlog.contextvars.clear_contextvars()
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        if requester_id := request.headers.get("X-User-ID"):
            context["requester_id"] = requester_id
        structlog.contextvars.bind_contextvars(**context)

        start = time.monotonic()
        await log.ainfo("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            await log.aexception(
                "request_crashed",
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(start),
            )
            raise

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(start),
        )
        response.headers["X-Request-ID"] = request_id
        return response
