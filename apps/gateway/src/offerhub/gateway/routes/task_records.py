"""TaskRecord 路由

POST  /api/task-records                              创建 TaskRecord（201）
GET   /api/task-records/project/{project_id}         按项目查询（404 表示不存在）
GET   /api/task-records/client/{client_id}           按 client 列表查询
GET   /api/task-records/freelancer/{freelancer_id}   按 freelancer 列表查询
PATCH /api/task-records/{record_id}/rating           评分（仅一次）

业务异常由 main.py 注册的 AppError handler 统一转为 JSON 错误响应。
"""

from fastapi import APIRouter, Depends
from offerhub.core.models import CreateTaskRecordData, TaskRecord, UpdateTaskRatingData
from pydantic import BaseModel
from starlette.responses import JSONResponse

from ..deps import get_requester_id, get_task_record_service
from ..services.task_record_service import TaskRecordService

router = APIRouter()


class CreateTaskRecordResponse(BaseModel):
    """创建响应：记录 + 降级警告"""

    record: TaskRecord
    warnings: list[str]


class TaskRecordListResponse(BaseModel):
    """列表响应"""

    records: list[TaskRecord]


@router.post("/api/task-records", status_code=201, response_model=CreateTaskRecordResponse)
async def create_task_record(
    body: CreateTaskRecordData,
    requester_id: str = Depends(get_requester_id),
    service: TaskRecordService = Depends(get_task_record_service),
):
    """记录任务结果，推进项目到终态"""
    result = await service.create_task_record(body, requester_id)
    return CreateTaskRecordResponse(record=result.record, warnings=result.warnings)


@router.get("/api/task-records/project/{project_id}", response_model=TaskRecord)
async def get_task_record_by_project(
    project_id: str,
    service: TaskRecordService = Depends(get_task_record_service),
):
    """按项目查询 TaskRecord"""
    record = await service.get_task_record_by_project_id(project_id)
    if record is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": {
                    "code": "TASK_RECORD_NOT_FOUND",
                    "message": f"No task record for project {project_id}",
                }
            },
        )
    return record


@router.get("/api/task-records/client/{client_id}", response_model=TaskRecordListResponse)
async def list_task_records_by_client(
    client_id: str,
    service: TaskRecordService = Depends(get_task_record_service),
):
    """按 client 查询，created_at 倒序"""
    records = await service.get_task_records_by_client_id(client_id)
    return TaskRecordListResponse(records=records)


@router.get(
    "/api/task-records/freelancer/{freelancer_id}",
    response_model=TaskRecordListResponse,
)
async def list_task_records_by_freelancer(
    freelancer_id: str,
    service: TaskRecordService = Depends(get_task_record_service),
):
    """按 freelancer 查询，created_at 倒序"""
    records = await service.get_task_records_by_freelancer_id(freelancer_id)
    return TaskRecordListResponse(records=records)


@router.patch("/api/task-records/{record_id}/rating", response_model=TaskRecord)
async def update_task_rating(
    record_id: str,
    body: UpdateTaskRatingData,
    requester_id: str = Depends(get_requester_id),
    service: TaskRecordService = Depends(get_task_record_service),
):
    """为已完成任务评分"""
    return await service.update_task_rating(record_id, body, requester_id)
