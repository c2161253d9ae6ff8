"""统计路由

GET /api/analytics:               完成率、逾期、生产力评分等统计
GET /api/analytics/dashboard:     统计 + 即将到期 / 最近完成 / 高优先级列表
GET /api/analytics/status-counts: 任务页状态计数
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pracsphere.core.models import Dashboard, StatusCounts, TaskStatistics

from ..deps import get_current_owner, get_now, get_task_service
from ..services.task_service import TaskService

router = APIRouter()


@router.get("/api/analytics", response_model=TaskStatistics)
async def get_statistics(
    owner: str = Depends(get_current_owner),
    now: datetime = Depends(get_now),
    service: TaskService = Depends(get_task_service),
):
    return await service.get_statistics(owner, now)


@router.get("/api/analytics/dashboard", response_model=Dashboard)
async def get_dashboard(
    owner: str = Depends(get_current_owner),
    now: datetime = Depends(get_now),
    service: TaskService = Depends(get_task_service),
):
    return await service.get_dashboard(owner, now)


@router.get("/api/analytics/status-counts", response_model=StatusCounts)
async def get_status_counts(
    owner: str = Depends(get_current_owner),
    now: datetime = Depends(get_now),
    service: TaskService = Depends(get_task_service),
):
    return await service.get_status_counts(owner, now)
