"""图片对象存储适配器

对外只暴露两个能力："按目录存入字节并返回稳定 URL" 与 "删除已存入的 URL"。
- LocalImageStore: 写入本地 media 目录，由 gateway 以静态文件方式提供
- HttpImageStore: 通过 httpx 上传到远端图片服务
两者的失败都统一包装为 UpstreamStorageError。
"""

import mimetypes
from pathlib import Path
from typing import Protocol

import httpx
import structlog
from pracsphere.core.exceptions import UpstreamStorageError
from pracsphere.core.models import ImageUpload
from ulid import ULID

log = structlog.get_logger()

# 本地图片对外 URL 路径前缀（gateway 在此挂载 StaticFiles）
MEDIA_URL_PATH = "/media"


class ImageStore(Protocol):
    """图片存储接口"""

    async def put_image(self, folder: str, image: ImageUpload) -> str:
        """存入图片，返回可长期访问的 URL"""
        ...

    async def delete_image(self, url: str) -> None:
        """删除之前存入的图片"""
        ...


def _guess_extension(image: ImageUpload) -> str:
    """根据 MIME 类型推断扩展名，失败时沿用原文件名后缀"""
    ext = mimetypes.guess_extension(image.content_type or "")
    if ext:
        return ext
    return Path(image.filename).suffix


class LocalImageStore:
    """本地文件系统图片存储"""

    def __init__(self, media_dir: Path, public_base_url: str = "") -> None:
        """
        Args:
            media_dir: 图片根目录
            public_base_url: URL 前缀（如 https://tasks.example.com），为空时生成相对 URL
        """
        self._media_dir = media_dir
        self._url_prefix = f"{public_base_url.rstrip('/')}{MEDIA_URL_PATH}/"

    @property
    def media_dir(self) -> Path:
        return self._media_dir

    async def put_image(self, folder: str, image: ImageUpload) -> str:
        name = f"{ULID()}{_guess_extension(image)}"
        file_path = self._media_dir / folder / name
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(image.data)
        except OSError as e:
            log.error(
                "image_write_failed",
                path=str(file_path),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamStorageError() from e
        return f"{self._url_prefix}{folder}/{name}"

    async def delete_image(self, url: str) -> None:
        if not url.startswith(self._url_prefix):
            log.warning("image_delete_skipped", url=url, reason="foreign_url")
            return
        relative = url[len(self._url_prefix):]
        file_path = (self._media_dir / relative).resolve()
        # 只允许删除 media 目录内的文件
        if not file_path.is_relative_to(self._media_dir.resolve()):
            log.warning("image_delete_skipped", url=url, reason="outside_media_dir")
            return
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            raise UpstreamStorageError() from e


class HttpImageStore:
    """远端图片服务客户端

    上传：POST {upload_url}，multipart 字段 file + folder，
    响应 JSON 中读取 secure_url（或 url）。
    删除：DELETE {upload_url}?url=<图片 URL>。
    """

    def __init__(
        self,
        upload_url: str,
        api_key: str = "",
        timeout_s: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            upload_url: 上传接口地址
            api_key: Bearer 访问密钥，为空时不发送 Authorization 头
            timeout_s: 单次请求超时（秒）
            transport: 自定义 httpx transport（测试注入）
        """
        self._upload_url = upload_url
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        return httpx.AsyncClient(
            timeout=self._timeout_s,
            headers=headers,
            transport=self._transport,
        )

    async def put_image(self, folder: str, image: ImageUpload) -> str:
        try:
            async with self._client() as http_client:
                resp = await http_client.post(
                    self._upload_url,
                    data={"folder": folder},
                    files={"file": (image.filename or "upload", image.data, image.content_type)},
                )
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error(
                "image_upload_request_failed",
                upload_url=self._upload_url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamStorageError() from e

        url = None
        if isinstance(payload, dict):
            url = payload.get("secure_url") or payload.get("url")
        if not url:
            log.error("image_upload_missing_url", upload_url=self._upload_url)
            raise UpstreamStorageError()
        return url

    async def delete_image(self, url: str) -> None:
        try:
            async with self._client() as http_client:
                resp = await http_client.delete(self._upload_url, params={"url": url})
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamStorageError() from e
