"""TraceMiddleware -- TaskRecord 操作追踪

从 /api/task-records/... 路径中提取实体 ID，绑定 trace_id 与实体字段，
贯穿同一请求内的 service / store / registrar 日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# 路径段 -> 绑定到日志上下文的字段名
_SCOPED_SEGMENTS = {
    "project": "project_id",
    "client": "client_id",
    "freelancer": "freelancer_id",
}


def extract_trace_fields(path: str) -> dict[str, str]:
    """从路径提取追踪字段

    /api/task-records/project/P1          -> {"project_id": "P1", "trace_id": "trace-P1"}
    /api/task-records/R1/rating           -> {"record_id": "R1", "trace_id": "trace-R1"}
    """
    parts = [p for p in path.split("/") if p]
    if len(parts) < 3 or parts[:2] != ["api", "task-records"]:
        return {}

    head = parts[2]
    if head in _SCOPED_SEGMENTS:
        if len(parts) < 4:
            return {}
        entity_id = parts[3]
        return {_SCOPED_SEGMENTS[head]: entity_id, "trace_id": f"trace-{entity_id}"}

    return {"record_id": head, "trace_id": f"trace-{head}"}


class TraceMiddleware(BaseHTTPMiddleware):
    """TaskRecord 级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        fields = extract_trace_fields(request.url.path)
        if fields:
            structlog.contextvars.bind_contextvars(**fields)

        return await call_next(request)
