"""Analytics Engine -- 从任务列表派生统计与生产力评分

纯函数 (tasks, now)。所有日期比较以 now 所在自然日为基准，
任务截止日期本身就是按天存储的 date，不涉及时刻比较。
"""

import math
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from .config import DASHBOARD_LIST_LIMIT
from .models.enums import TaskPriority, TaskStatus
from .models.statistics import Dashboard, TaskStatistics
from .models.task import Task

# 本周窗口：[today, today + 7 天]，两端包含
WEEK_WINDOW_DAYS = 7

# 生产力评分权重
COMPLETION_WEIGHT = 0.5
OVERDUE_PENALTY = 30
HIGH_PRIORITY_BONUS = 2


def round_half_up(value: float) -> int:
    """四舍五入（.5 向上取整），与内置 round 的银行家舍入不同"""
    return math.floor(value + 0.5)


def _today(now: datetime | date) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def is_overdue(task: Task, today: date) -> bool:
    """未完成且截止日期早于今天"""
    return task.status == TaskStatus.PENDING and task.due_date < today


def completion_rate(total: int, completed: int) -> int:
    if total == 0:
        return 0
    return round_half_up(completed / total * 100)


def productivity_score(
    total: int,
    rate: int,
    overdue: int,
    completed_high_priority: int,
) -> int:
    """生产力评分，结果限定在 [0, 100]

    完成率占 50% 权重，逾期比例最多扣 30 分，
    每个已完成的高优先级任务加 2 分。
    """
    if total == 0:
        return 0
    score = rate * COMPLETION_WEIGHT
    score -= (overdue / total) * OVERDUE_PENALTY
    score += completed_high_priority * HIGH_PRIORITY_BONUS
    return max(0, min(100, round_half_up(score)))


def compute_statistics(tasks: Sequence[Task], now: datetime | date) -> TaskStatistics:
    """计算任务统计

    Args:
        tasks: 单个 owner 的任务列表
        now: 参考时间（调用方负责时区换算）

    Returns:
        TaskStatistics
    """
    today = _today(now)
    week_end = today + timedelta(days=WEEK_WINDOW_DAYS)

    pending = [t for t in tasks if t.status == TaskStatus.PENDING]
    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]

    total = len(tasks)
    overdue = sum(1 for t in tasks if is_overdue(t, today))
    rate = completion_rate(total, len(completed))
    completed_high = sum(1 for t in completed if t.priority == TaskPriority.HIGH)

    return TaskStatistics(
        total_tasks=total,
        completed_tasks=len(completed),
        pending_tasks=len(pending),
        overdue_tasks=overdue,
        completion_rate=rate,
        today_tasks=sum(1 for t in pending if t.due_date == today),
        week_tasks=sum(1 for t in pending if today <= t.due_date <= week_end),
        high_priority=sum(1 for t in pending if t.priority == TaskPriority.HIGH),
        medium_priority=sum(1 for t in pending if t.priority == TaskPriority.MEDIUM),
        low_priority=sum(1 for t in pending if t.priority == TaskPriority.LOW),
        productivity_score=productivity_score(total, rate, overdue, completed_high),
    )


def build_dashboard(
    tasks: Sequence[Task],
    now: datetime | date,
    limit: int = DASHBOARD_LIST_LIMIT,
) -> Dashboard:
    """Dashboard 视图：统计 + 即将到期 / 最近完成 / 高优先级列表"""
    pending_by_due = sorted(
        (t for t in tasks if t.status == TaskStatus.PENDING),
        key=lambda t: t.due_date,
    )
    return Dashboard(
        statistics=compute_statistics(tasks, now),
        upcoming=pending_by_due[:limit],
        # 没有完成时间字段，按列表顺序截取
        recent_completed=[t for t in tasks if t.status == TaskStatus.COMPLETED][:limit],
        high_priority_tasks=[
            t for t in pending_by_due if t.priority == TaskPriority.HIGH
        ][:limit],
    )
