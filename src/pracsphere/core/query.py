"""Query Engine -- 单个 owner 任务列表的筛选/搜索/排序

纯函数，不修改输入列表。组合查询顺序固定为：
状态筛选 -> 关键词搜索 -> 排序（稳定排序，平局保留筛选后的相对顺序）。
"""

from collections.abc import Sequence
from datetime import date

from .analytics import is_overdue
from .exceptions import ValidationError
from .models.enums import SortKey, StatusFilter, TaskStatus, priority_rank
from .models.inputs import TaskQuery
from .models.statistics import StatusCounts
from .models.task import Task


def parse_status_filter(value: str | StatusFilter) -> StatusFilter:
    try:
        return StatusFilter(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status filter: {value!r}",
            fields=["status"],
        ) from None


def parse_sort_key(value: str | SortKey) -> SortKey:
    try:
        return SortKey(value)
    except ValueError:
        raise ValidationError(
            f"Invalid sort key: {value!r}",
            fields=["sort"],
        ) from None


def filter_by_status(
    tasks: Sequence[Task],
    status_filter: str | StatusFilter = StatusFilter.ALL,
) -> list[Task]:
    """按状态筛选，all 时原样返回"""
    status_filter = parse_status_filter(status_filter)
    if status_filter == StatusFilter.ALL:
        return list(tasks)
    wanted = TaskStatus(status_filter.value)
    return [t for t in tasks if t.status == wanted]


def search(tasks: Sequence[Task], term: str | None) -> list[Task]:
    """标题或描述包含关键词（不区分大小写），空关键词原样返回"""
    if not term or not term.strip():
        return list(tasks)
    needle = term.lower()
    return [
        t
        for t in tasks
        if needle in t.title.lower() or needle in t.description.lower()
    ]


def sort_tasks(
    tasks: Sequence[Task],
    key: str | SortKey = SortKey.DUE_DATE,
) -> list[Task]:
    """稳定排序

    - dueDate: 截止日期升序
    - priority: 优先级降序（high > medium > low，缺失按 low）
    - status: pending 在前，completed 在后
    """
    key = parse_sort_key(key)
    if key == SortKey.DUE_DATE:
        return sorted(tasks, key=lambda t: t.due_date)
    if key == SortKey.PRIORITY:
        return sorted(tasks, key=lambda t: -priority_rank(t.priority))
    return sorted(tasks, key=lambda t: t.status != TaskStatus.PENDING)


def apply_query(tasks: Sequence[Task], query: TaskQuery) -> list[Task]:
    """组合查询：状态筛选 -> 搜索 -> 排序"""
    result = filter_by_status(tasks, query.status)
    result = search(result, query.search)
    return sort_tasks(result, query.sort)


def status_counts(tasks: Sequence[Task], today: date) -> StatusCounts:
    """任务页顶部的状态计数，overdue 只统计未完成任务"""
    pending = [t for t in tasks if t.status == TaskStatus.PENDING]
    return StatusCounts(
        all=len(tasks),
        pending=len(pending),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
        overdue=sum(1 for t in tasks if is_overdue(t, today)),
    )
