"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store / Registrar / Service

Store 与 registrar 实例通过 app.state 管理，在 lifespan 中初始化/清理。
请求者身份由上游认证层写入 X-User-ID 请求头，此处只做读取。
"""

from fastapi import Depends, Header, HTTPException, Request
from offerhub.core.store import StoreGroup

from .services.task_record_service import TaskRecordService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_registrar(request: Request):
    """从 app.state 获取 registrar 实例"""
    return request.app.state.registrar


def get_task_record_service(
    request: Request,
    store_group: StoreGroup = Depends(get_store_group),
    registrar=Depends(get_registrar),
) -> TaskRecordService:
    """按 app.state 中的 registrar 配置构建 TaskRecordService"""
    config = request.app.state.registrar_config
    return TaskRecordService(
        store_group,
        registrar,
        max_attempts=config.max_attempts,
        backoff_base_s=config.backoff_base_s,
    )


def get_requester_id(x_user_id: str | None = Header(default=None)) -> str:
    """读取请求者 ID，缺失时返回 401"""
    if not x_user_id:
        raise HTTPException(
            status_code=401,
            detail={"code": "UNAUTHENTICATED", "message": "X-User-ID header is required"},
        )
    return x_user_id
