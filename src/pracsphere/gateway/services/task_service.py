"""TaskService -- 任务增删改查业务逻辑

所有操作先经过身份校验（授权门），再做一次性输入校验，
最后以 task_id + owner_id 组合条件访问存储：
- 不存在与不属于当前用户对调用方不可区分（均为 NotFoundError / no-op）
- 全量更新为 last-write-wins，不做并发版本检查
- 创建要么任务与全部图片一起落盘，要么整体失败
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime

import aiosqlite
import structlog
from pracsphere.core.analytics import build_dashboard, compute_statistics
from pracsphere.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    UpstreamStorageError,
)
from pracsphere.core.models import (
    Dashboard,
    ImageUpload,
    StatusCounts,
    StatusPatchInput,
    Task,
    TaskCreateInput,
    TaskQuery,
    TaskStatistics,
    TaskUpdateInput,
)
from pracsphere.core.query import apply_query, status_counts
from pracsphere.core.store import StoreGroup
from pracsphere.core.validation import (
    validate_create,
    validate_status_patch,
    validate_update,
)
from ulid import ULID

from .image_pipeline import ImagePipeline

log = structlog.get_logger()


@contextmanager
def storage_errors(operation: str, **context) -> Iterator[None]:
    """将持久化层异常记录日志后转换为通用 UpstreamStorageError"""
    try:
        yield
    except aiosqlite.Error as e:
        log.error(
            "store_operation_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
            **context,
        )
        raise UpstreamStorageError() from e


def require_owner(owner: str | None) -> str:
    """校验已解析的用户身份，缺失时抛出 AuthenticationError"""
    if owner is None or not owner.strip():
        raise AuthenticationError()
    return owner


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup, image_pipeline: ImagePipeline) -> None:
        self._stores = store_group
        self._images = image_pipeline

    async def create_task(
        self,
        owner: str | None,
        data: TaskCreateInput,
        images: Sequence[ImageUpload] = (),
    ) -> str:
        """创建任务

        Args:
            owner: 已验证的用户身份
            data: 创建输入
            images: 附带的原始图片文件

        Returns:
            新任务 task_id

        Raises:
            AuthenticationError: 未登录
            ValidationError: 必填字段缺失或格式非法
            UpstreamStorageError: 图片上传或写库失败（不会留下任务记录）
        """
        owner = require_owner(owner)
        fields = validate_create(data)

        # 图片先上传，任一失败则整体失败，任务不落盘
        image_urls = await self._images.upload_all(images)

        task = Task(
            task_id=str(ULID()),
            owner_id=owner,
            title=fields.title,
            description=fields.description,
            due_date=fields.due_date,
            status=fields.status,
            priority=fields.priority,
            images=image_urls,
            created_at=datetime.now(UTC),
        )
        try:
            with storage_errors("create_task", task_id=task.task_id):
                await self._stores.task_store.create_task(task)
        except UpstreamStorageError:
            await self._images.discard(image_urls)
            raise

        log.info(
            "task_created",
            task_id=task.task_id,
            priority=task.priority.value,
            image_count=len(image_urls),
        )
        return task.task_id

    async def list_tasks(self, owner: str | None) -> list[Task]:
        """查询当前用户全部任务，按截止日期升序"""
        owner = require_owner(owner)
        with storage_errors("list_tasks"):
            return await self._stores.task_store.list_tasks(owner)

    async def get_task(self, owner: str | None, task_id: str) -> Task:
        owner = require_owner(owner)
        with storage_errors("get_task", task_id=task_id):
            task = await self._stores.task_store.get_task(task_id, owner)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def update_task(
        self,
        owner: str | None,
        task_id: str,
        data: TaskUpdateInput,
    ) -> None:
        """全量更新五个可变字段（images / created_at 不变）

        Raises:
            NotFoundError: 任务不存在或不属于当前用户
        """
        owner = require_owner(owner)
        fields = validate_update(data)

        with storage_errors("update_task", task_id=task_id):
            matched = await self._stores.task_store.replace_task_fields(
                task_id,
                owner,
                title=fields.title,
                description=fields.description,
                due_date=fields.due_date,
                status=fields.status.value,
                priority=fields.priority.value,
            )
        if not matched:
            raise NotFoundError(task_id)

        log.info("task_updated", task_id=task_id, status=fields.status.value)

    async def patch_status(
        self,
        owner: str | None,
        task_id: str,
        data: StatusPatchInput,
    ) -> None:
        """仅更新状态，重复设置同一状态不报错

        Raises:
            NotFoundError: 任务不存在或不属于当前用户
        """
        owner = require_owner(owner)
        status = validate_status_patch(data)

        with storage_errors("patch_status", task_id=task_id):
            matched = await self._stores.task_store.update_task_status(
                task_id, owner, status.value
            )
        if not matched:
            raise NotFoundError(task_id)

        log.info("task_status_patched", task_id=task_id, status=status.value)

    async def delete_task(self, owner: str | None, task_id: str) -> None:
        """删除任务，不存在或不属于当前用户时为 no-op（幂等）"""
        owner = require_owner(owner)
        with storage_errors("delete_task", task_id=task_id):
            deleted = await self._stores.task_store.delete_task(task_id, owner)
        log.info("task_deleted", task_id=task_id, deleted=deleted)

    async def query_tasks(self, owner: str | None, query: TaskQuery) -> list[Task]:
        """状态筛选 -> 搜索 -> 排序"""
        tasks = await self.list_tasks(owner)
        return apply_query(tasks, query)

    async def get_status_counts(self, owner: str | None, now: datetime) -> StatusCounts:
        tasks = await self.list_tasks(owner)
        return status_counts(tasks, now.date())

    async def get_statistics(self, owner: str | None, now: datetime) -> TaskStatistics:
        tasks = await self.list_tasks(owner)
        return compute_statistics(tasks, now)

    async def get_dashboard(self, owner: str | None, now: datetime) -> Dashboard:
        tasks = await self.list_tasks(owner)
        return build_dashboard(tasks, now)
