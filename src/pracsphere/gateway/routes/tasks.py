"""任务路由

POST   /api/tasks:            创建任务（multipart 表单，可附带 images；也接受 JSON）
GET    /api/tasks:            任务列表，支持 status / search / sort
GET    /api/tasks/{task_id}:  任务详情
PUT    /api/tasks/{task_id}:  全量更新
PATCH  /api/tasks/{task_id}:  仅更新状态
DELETE /api/tasks/{task_id}:  删除（幂等）

请求体沿用前端表单字段名 dueDate（同时接受 due_date），
响应统一为 snake_case 字段（task_id、due_date、created_at），与统计、头像接口一致。
"""

from fastapi import APIRouter, Depends, Query, Request
from pracsphere.core.exceptions import ValidationError
from pracsphere.core.models import (
    ImageUpload,
    StatusPatchInput,
    Task,
    TaskCreateInput,
    TaskQuery,
    TaskUpdateInput,
)
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData, UploadFile
from starlette.responses import JSONResponse

from ..deps import get_current_owner, get_task_service
from ..services.task_service import TaskService

router = APIRouter()


class TaskCreatedResponse(BaseModel):
    """创建任务响应"""

    task_id: str


class MessageResponse(BaseModel):
    message: str


def _form_text(form: FormData, name: str) -> str | None:
    value = form.get(name)
    return value if isinstance(value, str) else None


async def _read_create_request(request: Request) -> tuple[TaskCreateInput, list[ImageUpload]]:
    """解析创建请求：multipart/form-data 或 application/json"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Malformed request body") from None
        if not isinstance(body, dict):
            raise ValidationError("Malformed request body")
        try:
            return TaskCreateInput.model_validate(body), []
        except PydanticValidationError:
            raise ValidationError("Malformed request body") from None

    form = await request.form()
    data = TaskCreateInput(
        title=_form_text(form, "title"),
        description=_form_text(form, "description"),
        due_date=_form_text(form, "dueDate") or _form_text(form, "due_date"),
        priority=_form_text(form, "priority"),
    )
    images = []
    for item in form.getlist("images"):
        if not isinstance(item, UploadFile):
            continue
        images.append(
            ImageUpload(
                filename=item.filename or "",
                content_type=item.content_type or "application/octet-stream",
                data=await item.read(),
            )
        )
    return data, images


@router.post("/api/tasks", status_code=201, response_model=TaskCreatedResponse)
async def create_task(
    request: Request,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    """创建任务，返回 201 + task_id"""
    data, images = await _read_create_request(request)
    task_id = await service.create_task(owner, data, images)
    return JSONResponse(
        status_code=201,
        content=TaskCreatedResponse(task_id=task_id).model_dump(),
    )


@router.get("/api/tasks", response_model=list[Task])
async def list_tasks(
    status: str = Query(default="all", description="all / pending / completed"),
    search: str = Query(default="", description="标题或描述关键词"),
    sort: str = Query(default="dueDate", description="dueDate / priority / status"),
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    """查询任务列表，默认按截止日期升序"""
    return await service.query_tasks(
        owner,
        TaskQuery(status=status, search=search, sort=sort),
    )


@router.get("/api/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    """任务详情，响应字段为 snake_case（task_id / due_date / created_at）"""
    return await service.get_task(owner, task_id)


@router.put("/api/tasks/{task_id}", response_model=MessageResponse)
async def update_task(
    task_id: str,
    body: TaskUpdateInput,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    """全量更新：title / description / dueDate / status / priority 全部必填"""
    await service.update_task(owner, task_id, body)
    return MessageResponse(message="Task updated successfully")


@router.patch("/api/tasks/{task_id}", response_model=MessageResponse)
async def patch_task_status(
    task_id: str,
    body: StatusPatchInput,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    await service.patch_status(owner, task_id, body)
    return MessageResponse(message="Task updated")


@router.delete("/api/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    """删除任务；不存在或不属于当前用户时同样返回 200"""
    await service.delete_task(owner, task_id)
    return MessageResponse(message="Task deleted")
