"""统计模型 -- 由 analytics 模块从任务列表派生，只读"""

from pydantic import BaseModel, Field

from .task import Task


class TaskStatistics(BaseModel):
    """任务统计结果"""

    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    completion_rate: int = Field(default=0, description="完成率（百分比整数）")
    today_tasks: int = 0
    week_tasks: int = 0
    high_priority: int = Field(default=0, description="待办高优先级数量")
    medium_priority: int = 0
    low_priority: int = 0
    productivity_score: int = Field(default=0, ge=0, le=100)


class StatusCounts(BaseModel):
    """任务页状态计数"""

    all: int = 0
    pending: int = 0
    completed: int = 0
    overdue: int = 0


class Dashboard(BaseModel):
    """Dashboard 视图：统计 + 三个摘要列表"""

    statistics: TaskStatistics
    upcoming: list[Task] = Field(default_factory=list, description="最近到期的待办")
    recent_completed: list[Task] = Field(default_factory=list)
    high_priority_tasks: list[Task] = Field(default_factory=list)
