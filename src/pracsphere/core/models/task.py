"""Task Domain Model

一条任务只属于创建它的 owner，所有访问路径都必须按 owner_id 过滤。
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from .enums import TaskPriority, TaskStatus


class Task(BaseModel):
    """Task 数据模型

    task_id / owner_id / created_at 创建后不可变；
    images 仅在创建时由图片上传流水线写入。
    """

    task_id: str = Field(description="唯一标识，ULID 格式")
    owner_id: str = Field(description="创建者身份标识（邮箱）")
    title: str = Field(description="任务标题")
    description: str = Field(description="任务描述")
    due_date: date = Field(description="截止日期（按天计算）")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority | None = Field(
        default=TaskPriority.MEDIUM,
        description="优先级，历史数据可能为空",
    )
    images: list[str] = Field(default_factory=list, description="图片 URL 列表")
    created_at: datetime = Field(description="创建时间")


class ImageUpload(BaseModel):
    """待上传的原始图片文件"""

    filename: str = Field(default="", description="原始文件名")
    content_type: str = Field(default="application/octet-stream", description="MIME 类型")
    data: bytes = Field(default=b"", description="文件内容")

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0
