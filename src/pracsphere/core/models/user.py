"""User Domain Model -- 任务核心只读，仅 profile_image 可修改"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """用户数据模型"""

    email: str = Field(description="用户唯一标识")
    name: str = Field(default="", description="显示名称")
    profile_image: str | None = Field(default=None, description="头像 data URI 或 URL")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime | None = Field(default=None, description="最近更新时间")
