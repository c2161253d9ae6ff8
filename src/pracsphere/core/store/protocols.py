"""Store Protocol 接口定义

定义 TaskStore、UserStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from datetime import date, datetime
from typing import Protocol

from ..models.task import Task
from ..models.user import User


class TaskStore(Protocol):
    """Task 存储接口 -- 每个方法都以 owner_id 作为过滤条件"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str, owner_id: str) -> Task | None:
        """按 task_id + owner_id 查询任务"""
        ...

    async def list_tasks(self, owner_id: str) -> list[Task]:
        """查询 owner 的全部任务，按 due_date 升序"""
        ...

    async def replace_task_fields(
        self,
        task_id: str,
        owner_id: str,
        title: str,
        description: str,
        due_date: date,
        status: str,
        priority: str,
    ) -> bool:
        """全量替换可变字段，返回是否匹配到记录"""
        ...

    async def update_task_status(self, task_id: str, owner_id: str, status: str) -> bool:
        """仅更新状态，返回是否匹配到记录"""
        ...

    async def delete_task(self, task_id: str, owner_id: str) -> bool:
        """删除任务，返回是否删除了记录"""
        ...


class UserStore(Protocol):
    """User 存储接口"""

    async def get_user(self, email: str) -> User | None:
        ...

    async def set_profile_image(self, email: str, image: str, now: datetime) -> None:
        ...

    async def clear_profile_image(self, email: str, now: datetime) -> None:
        ...
