"""枚举定义

包含 TaskStatus、TaskPriority、StatusFilter、SortKey 枚举，
以及优先级排序权重 PRIORITY_RANK。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    PENDING = "pending"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StatusFilter(StrEnum):
    """列表状态筛选"""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class SortKey(StrEnum):
    """列表排序键"""

    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    STATUS = "status"


# 优先级排序权重：high > medium > low，缺失优先级按 low 处理
PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def priority_rank(priority: TaskPriority | None) -> int:
    """获取优先级排序权重

    Args:
        priority: 任务优先级，None 表示历史数据中未设置

    Returns:
        排序权重（越大越优先）
    """
    if priority is None:
        return PRIORITY_RANK[TaskPriority.LOW]
    return PRIORITY_RANK[priority]
