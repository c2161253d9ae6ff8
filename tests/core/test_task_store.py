"""SqliteTaskStore 测试

测试内容：
1. 写入/读取往返
2. owner 过滤：其他用户的任务不可见、不可改、不可删
3. 列表按 due_date 升序
4. 并发写：失败写入的回滚不影响其他请求的写入
"""

import asyncio
from datetime import date

import aiosqlite
from pracsphere.core.models import TaskPriority, TaskStatus
from pracsphere.core.store.sqlite_init import init_db


class TestTaskStore:
    async def test_create_and_get_round_trip(self, store_group, make_task):
        task = make_task(
            "Buy milk",
            "2% milk",
            priority=TaskPriority.HIGH,
            images=["/media/pracsphere-tasks/a.png", "/media/pracsphere-tasks/b.png"],
        )
        await store_group.task_store.create_task(task)

        loaded = await store_group.task_store.get_task(task.task_id, task.owner_id)
        assert loaded == task

    async def test_get_filters_by_owner(self, store_group, make_task):
        task = make_task(owner_id="alice@example.com")
        await store_group.task_store.create_task(task)

        assert await store_group.task_store.get_task(task.task_id, "bob@example.com") is None

    async def test_list_scoped_and_sorted(self, store_group, make_task):
        late = make_task("late", due_date=date(2026, 3, 1))
        early = make_task("early", due_date=date(2026, 1, 1))
        foreign = make_task("foreign", owner_id="bob@example.com")
        for t in (late, early, foreign):
            await store_group.task_store.create_task(t)

        tasks = await store_group.task_store.list_tasks("alice@example.com")
        assert [t.title for t in tasks] == ["early", "late"]

    async def test_replace_fields_keeps_images_and_created_at(self, store_group, make_task):
        task = make_task(images=["/media/x.png"])
        await store_group.task_store.create_task(task)

        matched = await store_group.task_store.replace_task_fields(
            task.task_id,
            task.owner_id,
            title="new",
            description="new desc",
            due_date=date(2026, 5, 5),
            status="completed",
            priority="low",
        )
        assert matched is True

        loaded = await store_group.task_store.get_task(task.task_id, task.owner_id)
        assert loaded.title == "new"
        assert loaded.status == TaskStatus.COMPLETED
        assert loaded.priority == TaskPriority.LOW
        assert loaded.images == task.images
        assert loaded.created_at == task.created_at

    async def test_foreign_update_does_not_match(self, store_group, make_task):
        task = make_task(owner_id="alice@example.com")
        await store_group.task_store.create_task(task)

        matched = await store_group.task_store.update_task_status(
            task.task_id, "bob@example.com", "completed"
        )
        assert matched is False
        loaded = await store_group.task_store.get_task(task.task_id, task.owner_id)
        assert loaded.status == TaskStatus.PENDING

    async def test_status_update_same_value_still_matches(self, store_group, make_task):
        task = make_task()
        await store_group.task_store.create_task(task)

        first = await store_group.task_store.update_task_status(
            task.task_id, task.owner_id, "completed"
        )
        second = await store_group.task_store.update_task_status(
            task.task_id, task.owner_id, "completed"
        )
        assert first is True
        assert second is True

    async def test_delete_scoped_by_owner(self, store_group, make_task):
        task = make_task(owner_id="alice@example.com")
        await store_group.task_store.create_task(task)

        assert await store_group.task_store.delete_task(task.task_id, "bob@example.com") is False
        assert await store_group.task_store.delete_task(task.task_id, task.owner_id) is True
        assert await store_group.task_store.delete_task(task.task_id, task.owner_id) is False

    async def test_legacy_row_without_priority(self, store_group, make_task):
        task = make_task(priority=None)
        await store_group.task_store.create_task(task)

        loaded = await store_group.task_store.get_task(task.task_id, task.owner_id)
        assert loaded.priority is None

    async def test_init_db_is_idempotent(self, store_group):
        await init_db(store_group.conn)
        cursor = await store_group.conn.execute("PRAGMA journal_mode;")
        row = await cursor.fetchone()
        assert row[0].lower() == "wal"

    async def test_failed_write_does_not_roll_back_concurrent_write(
        self, store_group, make_task
    ):
        task = make_task()
        await store_group.task_store.create_task(task)

        for _ in range(10):
            await store_group.task_store.update_task_status(
                task.task_id, task.owner_id, "pending"
            )
            duplicate, matched = await asyncio.gather(
                store_group.task_store.create_task(task),
                store_group.task_store.update_task_status(
                    task.task_id, task.owner_id, "completed"
                ),
                return_exceptions=True,
            )
            assert isinstance(duplicate, aiosqlite.IntegrityError)
            assert matched is True

            loaded = await store_group.task_store.get_task(task.task_id, task.owner_id)
            assert loaded.status == TaskStatus.COMPLETED

    async def test_user_write_not_lost_to_concurrent_failure(self, store_group, make_task):
        task = make_task()
        await store_group.task_store.create_task(task)

        results = await asyncio.gather(
            store_group.task_store.create_task(task),
            store_group.user_store.set_profile_image(
                "alice@example.com", "https://cdn.example.com/a.png", task.created_at
            ),
            return_exceptions=True,
        )
        assert isinstance(results[0], aiosqlite.IntegrityError)

        user = await store_group.user_store.get_user("alice@example.com")
        assert user is not None
        assert user.profile_image == "https://cdn.example.com/a.png"
