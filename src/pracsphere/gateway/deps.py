"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store / Service 实例

Store、图片流水线与身份解析器通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from datetime import datetime

from fastapi import Request
from pracsphere.core.store import StoreGroup

from .config import GatewayConfig
from .services.image_pipeline import ImagePipeline
from .services.profile_service import ProfileService
from .services.task_service import TaskService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_image_pipeline(request: Request) -> ImagePipeline:
    """从 app.state 获取 ImagePipeline 实例"""
    return request.app.state.image_pipeline


def get_current_owner(request: Request) -> str:
    """解析当前请求的用户身份，未登录时抛出 AuthenticationError"""
    return request.app.state.identity_resolver.resolve(request)


def get_task_service(request: Request) -> TaskService:
    return TaskService(get_store_group(request), get_image_pipeline(request))


def get_profile_service(request: Request) -> ProfileService:
    return ProfileService(get_store_group(request))


def get_now(request: Request) -> datetime:
    """当前时间（配置时区），用于按自然日统计"""
    config: GatewayConfig = request.app.state.gateway_config
    return datetime.now(config.zone())
