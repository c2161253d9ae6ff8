"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 图片存储与身份解析初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from pracsphere.core.config import get_db_path, get_media_dir
from pracsphere.core.store import create_store_group

from .config import GatewayConfig, load_gateway_config
from .errors import register_exception_handlers
from .identity import HeaderIdentityResolver
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import analytics, health, profile, tasks
from .services.image_pipeline import ImagePipeline
from .services.image_store import (
    MEDIA_URL_PATH,
    HttpImageStore,
    ImageStore,
    LocalImageStore,
)

log = structlog.get_logger()


def build_image_store(config: GatewayConfig, media_dir: Path) -> ImageStore:
    """根据配置选择图片存储实现"""
    if config.image_store == "http":
        if not config.image_upload_url:
            raise RuntimeError("PRACSPHERE_IMAGE_UPLOAD_URL is required when PRACSPHERE_IMAGE_STORE=http")
        return HttpImageStore(
            upload_url=config.image_upload_url,
            api_key=config.image_upload_key.get_secret_value(),
            timeout_s=config.image_upload_timeout_s,
        )
    media_dir.mkdir(parents=True, exist_ok=True)
    return LocalImageStore(media_dir, public_base_url=config.public_base_url)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和图片存储，关闭时清理连接"""
    config = load_gateway_config()
    app.state.gateway_config = config

    # 启动：初始化 Store
    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    image_store = build_image_store(config, get_media_dir())
    app.state.image_store = image_store
    app.state.image_pipeline = ImagePipeline(
        image_store,
        cleanup_on_failure=config.image_cleanup_on_failure,
    )
    app.state.identity_resolver = HeaderIdentityResolver(config.identity_header)

    log.info(
        "gateway_initialized",
        image_store=config.image_store,
        identity_header=config.identity_header,
        timezone=config.timezone,
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="PracSphere Tasks",
        version="0.1.0",
        description="个人任务管理 API：任务增删改查、图片附件、生产力统计",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    register_exception_handlers(app)

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(analytics.router, tags=["analytics"])
    app.include_router(profile.router, tags=["profile"])
    app.include_router(health.router, tags=["health"])

    # 本地图片存储模式下提供 /media 静态文件（目录在 lifespan 中创建）
    app.mount(
        MEDIA_URL_PATH,
        StaticFiles(directory=str(get_media_dir()), check_dir=False),
        name="media",
    )

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
