"""操作输入记录 -- 每个写操作一个显式结构

字段均允许为空，必填校验统一在服务边界由 validation 模块完成，
这样缺失字段返回 400 而不是框架默认的 422。
"""

from pydantic import BaseModel, ConfigDict, Field


class TaskCreateInput(BaseModel):
    """创建任务输入"""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")
    priority: str | None = None


class TaskUpdateInput(BaseModel):
    """全量更新输入（五个可变字段全部必填）"""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")
    status: str | None = None
    priority: str | None = None


class StatusPatchInput(BaseModel):
    """状态更新输入"""

    status: str | None = None


class TaskQuery(BaseModel):
    """列表查询参数：状态筛选 -> 关键词搜索 -> 排序"""

    status: str = Field(default="all", description="all / pending / completed")
    search: str = Field(default="", description="标题或描述关键词")
    sort: str = Field(default="dueDate", description="dueDate / priority / status")


class ProfileImageInput(BaseModel):
    """头像设置输入"""

    image: str | None = None
