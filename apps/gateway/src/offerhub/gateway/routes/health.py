"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，确认 task_records 表可读并报告 WAL 模式与磁盘空间；
         profile=full 时额外探测链上登记服务。
"""

import shutil

import structlog
from fastapi import APIRouter, Query, Request
from offerhub.core.store import StoreGroup
from offerhub.core.store.sqlite_init import verify_wal_mode
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


async def _check_store(store_group: StoreGroup) -> dict[str, str]:
    """task_records 可读即视为存储就绪"""
    try:
        cursor = await store_group.conn.execute("SELECT COUNT(*) FROM task_records")
        await cursor.fetchone()
        wal = await verify_wal_mode(store_group.conn)
    except Exception as e:
        log.warning("store_readiness_failed", error_type=type(e).__name__)
        return {"sqlite": f"error: {type(e).__name__}"}
    return {"sqlite": "ok", "journal_mode": "wal" if wal else "other"}


async def _check_registrar(registrar) -> str:
    """registrar 是软依赖：结果只做报告"""
    if registrar is None or not hasattr(registrar, "health_check"):
        return "skipped"
    try:
        healthy = await registrar.health_check()
    except Exception as e:
        log.warning("registrar_health_check_error", error=str(e))
        healthy = False
    return "ok" if healthy else "unreachable"


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="检查配置：core（默认）仅存储检查；full 额外探测 registrar",
    ),
):
    """Readiness 检查

    只有存储失败会返回 503；registrar 不可达记为 "unreachable"，不影响整体状态。
    """
    effective_profile = profile or "core"

    checks: dict = await _check_store(request.app.state.store_group)
    all_ok = checks["sqlite"] == "ok"

    checks["disk_space_mb"] = shutil.disk_usage("/").free // (1024 * 1024)

    if effective_profile == "full":
        checks["registrar"] = await _check_registrar(
            getattr(request.app.state, "registrar", None)
        )
    else:
        checks["registrar"] = "skipped"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "profile": effective_profile,
            "checks": checks,
        },
    )
