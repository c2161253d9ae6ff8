"""PracSphere Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    PRIORITY_RANK,
    SortKey,
    StatusFilter,
    TaskPriority,
    TaskStatus,
    priority_rank,
)
from .inputs import (
    ProfileImageInput,
    StatusPatchInput,
    TaskCreateInput,
    TaskQuery,
    TaskUpdateInput,
)
from .statistics import Dashboard, StatusCounts, TaskStatistics
from .task import ImageUpload, Task
from .user import User

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "StatusFilter",
    "SortKey",
    "PRIORITY_RANK",
    "priority_rank",
    # Task
    "Task",
    "ImageUpload",
    # User
    "User",
    # 输入
    "TaskCreateInput",
    "TaskUpdateInput",
    "StatusPatchInput",
    "TaskQuery",
    "ProfileImageInput",
    # 统计
    "TaskStatistics",
    "StatusCounts",
    "Dashboard",
]
