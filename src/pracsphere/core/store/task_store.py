"""TaskStore SQLite 实现

所有按 task_id 的读写都与 owner_id 组合在同一个 WHERE 条件里，
"不存在" 与 "不属于当前用户" 在这里是同一种结果。
"""

import asyncio
import json
from datetime import date, datetime

import aiosqlite

from ..models.task import Task

_TASK_COLUMNS = (
    "task_id, owner_id, title, description, due_date, "
    "status, priority, images, created_at"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        """
        Args:
            conn: 共享数据库连接
            write_lock: 同一连接上所有 store 共用的写锁
        """
        self._conn = conn
        self._write_lock = write_lock or asyncio.Lock()

    async def _write(self, sql: str, params: tuple) -> int:
        """执行写语句并提交，返回匹配行数；失败时回滚

        execute 与 commit/rollback 在写锁内完成，
        一个请求的 rollback 不会撤销另一个请求尚未提交的写入。
        """
        async with self._write_lock:
            try:
                cursor = await self._conn.execute(sql, params)
                await self._conn.commit()
            except Exception:
                await self._conn.rollback()
                raise
            return cursor.rowcount

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._write(
            f"INSERT INTO tasks ({_TASK_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                task.task_id,
                task.owner_id,
                task.title,
                task.description,
                task.due_date.isoformat(),
                task.status.value,
                task.priority.value if task.priority else None,
                json.dumps(task.images, ensure_ascii=False),
                task.created_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str, owner_id: str) -> Task | None:
        """按 task_id + owner_id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE task_id = ? AND owner_id = ?",
            (task_id, owner_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self, owner_id: str) -> list[Task]:
        """查询 owner 的全部任务，按 due_date 升序"""
        cursor = await self._conn.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE owner_id = ? "
            "ORDER BY due_date ASC, created_at ASC, task_id ASC",
            (owner_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

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
        """全量替换五个可变字段，images / created_at 不变

        Returns:
            True 如果匹配到记录
        """
        matched = await self._write(
            """
            UPDATE tasks
            SET title = ?, description = ?, due_date = ?, status = ?, priority = ?
            WHERE task_id = ? AND owner_id = ?
            """,
            (
                title,
                description,
                due_date.isoformat(),
                status,
                priority,
                task_id,
                owner_id,
            ),
        )
        return matched > 0

    async def update_task_status(self, task_id: str, owner_id: str, status: str) -> bool:
        """仅更新状态

        Returns:
            True 如果匹配到记录（值未变化也算匹配）
        """
        matched = await self._write(
            "UPDATE tasks SET status = ? WHERE task_id = ? AND owner_id = ?",
            (status, task_id, owner_id),
        )
        return matched > 0

    async def delete_task(self, task_id: str, owner_id: str) -> bool:
        """删除任务

        Returns:
            True 如果确实删除了记录
        """
        deleted = await self._write(
            "DELETE FROM tasks WHERE task_id = ? AND owner_id = ?",
            (task_id, owner_id),
        )
        return deleted > 0

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            task_id=row[0],
            owner_id=row[1],
            title=row[2],
            description=row[3],
            due_date=date.fromisoformat(row[4]),
            status=row[5],
            priority=row[6],
            images=json.loads(row[7]) if row[7] else [],
            created_at=datetime.fromisoformat(row[8]),
        )
