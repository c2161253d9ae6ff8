"""全局 pytest 配置 -- 临时 SQLite 数据库 fixture + 任务构造工具"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, date, datetime
from pathlib import Path

import pytest
import pytest_asyncio
from pracsphere.core.models import Task, TaskPriority, TaskStatus
from pracsphere.core.store import StoreGroup, create_store_group
from ulid import ULID


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供已初始化的临时 StoreGroup"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """构造 Task 的工厂，未指定字段使用默认值"""

    def _make(
        title: str = "Task",
        description: str = "",
        due_date: date = date(2026, 1, 15),
        status: TaskStatus = TaskStatus.PENDING,
        priority: TaskPriority | None = TaskPriority.MEDIUM,
        owner_id: str = "alice@example.com",
        images: list[str] | None = None,
    ) -> Task:
        return Task(
            task_id=str(ULID()),
            owner_id=owner_id,
            title=title,
            description=description or f"{title} description",
            due_date=due_date,
            status=status,
            priority=priority,
            images=images or [],
            created_at=datetime.now(UTC),
        )

    return _make
