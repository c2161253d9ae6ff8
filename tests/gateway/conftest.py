"""gateway 测试配置 -- FastAPI app + httpx AsyncClient + 服务 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pracsphere.core.store import StoreGroup
from pracsphere.gateway.config import GatewayConfig
from pracsphere.gateway.identity import HeaderIdentityResolver
from pracsphere.gateway.services.image_pipeline import ImagePipeline
from pracsphere.gateway.services.image_store import LocalImageStore
from pracsphere.gateway.services.profile_service import ProfileService
from pracsphere.gateway.services.task_service import TaskService

ALICE = {"X-Forwarded-Email": "alice@example.com"}
BOB = {"X-Forwarded-Email": "bob@example.com"}


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    path = tmp_path / "media"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def image_store(media_dir: Path) -> LocalImageStore:
    return LocalImageStore(media_dir)


@pytest.fixture
def task_service(store_group: StoreGroup, image_store: LocalImageStore) -> TaskService:
    return TaskService(store_group, ImagePipeline(image_store))


@pytest.fixture
def profile_service(store_group: StoreGroup) -> ProfileService:
    return ProfileService(store_group)


@pytest_asyncio.fixture
async def app(
    tmp_path: Path,
    media_dir: Path,
    store_group: StoreGroup,
    image_store: LocalImageStore,
    monkeypatch: pytest.MonkeyPatch,
):
    """创建测试用 FastAPI app，手动初始化 lifespan 状态"""
    monkeypatch.setenv("PRACSPHERE_DB_PATH", str(tmp_path / "sqlite" / "test.db"))
    monkeypatch.setenv("PRACSPHERE_MEDIA_DIR", str(media_dir))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from pracsphere.gateway.main import create_app

    application = create_app()

    config = GatewayConfig()
    application.state.gateway_config = config
    application.state.store_group = store_group
    application.state.image_store = image_store
    application.state.image_pipeline = ImagePipeline(image_store)
    application.state.identity_resolver = HeaderIdentityResolver(config.identity_header)

    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
