"""输入校验 -- 每个操作在服务边界调用一次

缺失字段一次性汇总后抛出 ValidationError，
字段值非法（日期格式、枚举值）同样以 ValidationError 报告。
"""

from datetime import date, datetime

from pydantic import BaseModel

from .exceptions import ValidationError
from .models.enums import TaskPriority, TaskStatus
from .models.inputs import StatusPatchInput, TaskCreateInput, TaskUpdateInput


class TaskFields(BaseModel):
    """校验通过的任务可变字段"""

    title: str
    description: str
    due_date: date
    status: TaskStatus
    priority: TaskPriority


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: dict[str, object]) -> None:
    """检查必填字段，缺失（None 或空白字符串）时抛出 ValidationError

    Args:
        values: 字段名 -> 原始值（字段名使用对外暴露的名称）
    """
    missing = [name for name, value in values.items() if _is_blank(value)]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            fields=missing,
        )


def parse_due_date(value: str) -> date:
    """解析截止日期，接受 YYYY-MM-DD 或 ISO 8601 时间戳（截断到日期）"""
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(
            f"Invalid dueDate: {value!r}, expected YYYY-MM-DD",
            fields=["dueDate"],
        ) from None


def parse_status(value: str) -> TaskStatus:
    try:
        return TaskStatus(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid status: {value!r}, expected one of "
            f"{', '.join(s.value for s in TaskStatus)}",
            fields=["status"],
        ) from None


def parse_priority(value: str | None) -> TaskPriority:
    """解析优先级，未提供时默认为 medium"""
    if _is_blank(value):
        return TaskPriority.MEDIUM
    try:
        return TaskPriority(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid priority: {value!r}, expected one of "
            f"{', '.join(p.value for p in TaskPriority)}",
            fields=["priority"],
        ) from None


def validate_create(data: TaskCreateInput) -> TaskFields:
    """校验创建输入：title / description / dueDate 必填，priority 可选"""
    require_fields(
        {
            "title": data.title,
            "description": data.description,
            "dueDate": data.due_date,
        }
    )
    return TaskFields(
        title=data.title,
        description=data.description,
        due_date=parse_due_date(data.due_date),
        status=TaskStatus.PENDING,
        priority=parse_priority(data.priority),
    )


def validate_update(data: TaskUpdateInput) -> TaskFields:
    """校验全量更新输入：五个可变字段全部必填"""
    require_fields(
        {
            "title": data.title,
            "description": data.description,
            "dueDate": data.due_date,
            "status": data.status,
            "priority": data.priority,
        }
    )
    return TaskFields(
        title=data.title,
        description=data.description,
        due_date=parse_due_date(data.due_date),
        status=parse_status(data.status),
        priority=parse_priority(data.priority),
    )


def validate_status_patch(data: StatusPatchInput) -> TaskStatus:
    require_fields({"status": data.status})
    return parse_status(data.status)
