"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + registrar 初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from offerhub.core.config import get_db_path
from offerhub.core.exceptions import AppError
from offerhub.core.store import create_store_group
from offerhub.registrar import build_registrar, load_registrar_config
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, task_records

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和 registrar，关闭时清理连接"""
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    registrar_config = load_registrar_config()
    app.state.registrar_config = registrar_config
    app.state.registrar = build_registrar(registrar_config)
    log.info(
        "registrar_initialized",
        mode=registrar_config.mode,
        base_url=registrar_config.base_url if registrar_config.mode == "http" else None,
        max_attempts=registrar_config.max_attempts,
    )

    yield

    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """将业务异常转为统一 JSON 错误响应"""
    if exc.status_code >= 500:
        log.error("request_failed", code=exc.code, error=exc.message)
    else:
        log.info("request_rejected", code=exc.code, status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": exc.code, "message": exc.message}},
    )


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException 统一为 {"error": {...}} 结构"""
    if isinstance(exc.detail, dict):
        error = exc.detail
    else:
        error = {"code": "HTTP_ERROR", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content={"error": error})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求体/参数校验失败 -> 422 VALIDATION_ERROR"""
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(
        status_code=422,
        content={"error": {"code": "VALIDATION_ERROR", "message": message}},
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Offer Hub Task Records",
        version="0.1.0",
        description="任务结果记录、链上登记与评分 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # 初始化日志
    setup_logging()
    setup_logfire()

    app.include_router(task_records.router, tags=["task-records"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
