"""Analytics Engine 测试

测试内容：
1. 计数 / 逾期 / 今日 / 本周 / 优先级分布
2. 完成率与生产力评分（含边界与取整）
3. Dashboard 摘要列表
"""

from datetime import date, datetime

from pracsphere.core.analytics import (
    build_dashboard,
    compute_statistics,
    productivity_score,
    round_half_up,
)
from pracsphere.core.models import TaskPriority, TaskStatus

NOW = datetime(2026, 1, 18, 21, 45)
TODAY = NOW.date()


def _sample(make_task):
    return [
        make_task("A", due_date=TODAY, priority=TaskPriority.HIGH),
        make_task("B", due_date=date(2026, 1, 25), priority=TaskPriority.MEDIUM),
        make_task("D", due_date=date(2026, 1, 10), priority=TaskPriority.MEDIUM),
        make_task(
            "E",
            due_date=date(2026, 1, 1),
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.HIGH,
        ),
        make_task(
            "F",
            due_date=date(2026, 1, 30),
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.LOW,
        ),
    ]


class TestStatistics:
    def test_empty_list(self):
        stats = compute_statistics([], NOW)
        assert stats.total_tasks == 0
        assert stats.completion_rate == 0
        assert stats.productivity_score == 0

    def test_counts(self, make_task):
        stats = compute_statistics(_sample(make_task), NOW)
        assert stats.total_tasks == 5
        assert stats.completed_tasks == 2
        assert stats.pending_tasks == 3
        assert stats.overdue_tasks == 1
        assert stats.completion_rate == 40
        assert stats.today_tasks == 1
        assert stats.week_tasks == 2
        assert (stats.high_priority, stats.medium_priority, stats.low_priority) == (1, 2, 0)

    def test_productivity_score(self, make_task):
        # 40 * 0.5 - (1/5) * 30 + 1 * 2 = 16
        stats = compute_statistics(_sample(make_task), NOW)
        assert stats.productivity_score == 16

    def test_overdue_excludes_completed(self, make_task):
        tasks = [
            make_task(due_date=date(2025, 12, 1), status=TaskStatus.COMPLETED),
            make_task(due_date=date(2025, 12, 2), status=TaskStatus.COMPLETED),
        ]
        assert compute_statistics(tasks, NOW).overdue_tasks == 0

    def test_week_window_is_inclusive(self, make_task):
        tasks = [
            make_task(due_date=TODAY),
            make_task(due_date=date(2026, 1, 25)),
            make_task(due_date=date(2026, 1, 26)),
            make_task(due_date=date(2026, 1, 17)),
        ]
        assert compute_statistics(tasks, NOW).week_tasks == 2

    def test_accepts_plain_date_as_now(self, make_task):
        tasks = [make_task(due_date=TODAY)]
        assert compute_statistics(tasks, TODAY).today_tasks == 1

    def test_missing_priority_not_counted_in_breakdown(self, make_task):
        stats = compute_statistics([make_task(priority=None)], NOW)
        assert (stats.high_priority, stats.medium_priority, stats.low_priority) == (0, 0, 0)

    def test_completion_rate_rounds_half_up(self, make_task):
        # 1/8 = 12.5% -> 13
        tasks = [make_task(status=TaskStatus.COMPLETED)] + [make_task() for _ in range(7)]
        assert compute_statistics(tasks, date(2025, 1, 1)).completion_rate == 13


class TestProductivityScore:
    def test_zero_total(self):
        assert productivity_score(0, 0, 0, 0) == 0

    def test_clamped_to_lower_bound(self):
        # 全部逾期：0 - 30 -> 0
        assert productivity_score(4, 0, 4, 0) == 0

    def test_clamped_to_upper_bound(self):
        # 100 * 0.5 + 30 * 2 = 110 -> 100
        assert productivity_score(30, 100, 0, 30) == 100

    def test_round_half_up(self):
        assert round_half_up(18.5) == 19
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_score_in_range_for_mixed_lists(self, make_task):
        for completed in range(0, 6):
            tasks = [
                make_task(status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)
                for _ in range(completed)
            ] + [make_task(due_date=date(2025, 1, 1)) for _ in range(5 - completed)]
            score = compute_statistics(tasks, NOW).productivity_score
            assert 0 <= score <= 100


class TestScenario:
    def test_buy_milk(self, make_task):
        milk = make_task(
            "Buy milk",
            "2% milk",
            due_date=TODAY,
            priority=TaskPriority.HIGH,
        )
        stats = compute_statistics([milk], NOW)
        assert stats.high_priority == 1
        assert stats.today_tasks == 1

        completed = milk.model_copy(update={"status": TaskStatus.COMPLETED})
        later = datetime(2026, 2, 1)
        assert compute_statistics([completed], later).overdue_tasks == 0


class TestDashboard:
    def test_lists(self, make_task):
        tasks = _sample(make_task)
        dashboard = build_dashboard(tasks, NOW)
        assert [t.title for t in dashboard.upcoming] == ["D", "A", "B"]
        assert [t.title for t in dashboard.recent_completed] == ["E", "F"]
        assert [t.title for t in dashboard.high_priority_tasks] == ["A"]
        assert dashboard.statistics.total_tasks == 5

    def test_limit(self, make_task):
        tasks = [make_task(due_date=date(2026, 2, day)) for day in range(1, 9)]
        dashboard = build_dashboard(tasks, NOW)
        assert len(dashboard.upcoming) == 5
        assert dashboard.upcoming[0].due_date == date(2026, 2, 1)
