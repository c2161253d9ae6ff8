"""ImagePipeline -- 任务图片上传流水线

按输入顺序逐个上传非空文件，返回顺序一致的 URL 列表。
任一文件上传失败立即终止（fail-fast，不重试，不返回部分结果）；
cleanup_on_failure 开启时删除本批次已上传的图片。
"""

from collections.abc import Sequence

import structlog
from pracsphere.core.config import TASK_IMAGE_FOLDER
from pracsphere.core.exceptions import UpstreamStorageError, ValidationError
from pracsphere.core.models import ImageUpload

from .image_store import ImageStore

log = structlog.get_logger()


class ImagePipeline:
    """图片上传流水线"""

    def __init__(
        self,
        image_store: ImageStore,
        folder: str = TASK_IMAGE_FOLDER,
        cleanup_on_failure: bool = True,
    ) -> None:
        self._image_store = image_store
        self._folder = folder
        self._cleanup_on_failure = cleanup_on_failure

    async def upload_all(self, images: Sequence[ImageUpload]) -> list[str]:
        """上传一批图片

        Args:
            images: 原始图片文件，空文件被跳过

        Returns:
            与输入顺序一致的 URL 列表

        Raises:
            ValidationError: 存在非 image/* 类型的文件（此时不会上传任何文件）
            UpstreamStorageError: 任一文件上传失败
        """
        pending = [image for image in images if not image.is_empty]
        self._check_media_types(pending)

        urls: list[str] = []
        for index, image in enumerate(pending):
            try:
                url = await self._image_store.put_image(self._folder, image)
            except Exception as e:
                log.error(
                    "image_upload_failed",
                    index=index,
                    filename=image.filename,
                    uploaded_before_failure=len(urls),
                    error_type=type(e).__name__,
                )
                if self._cleanup_on_failure:
                    await self.discard(urls)
                if isinstance(e, UpstreamStorageError):
                    raise
                raise UpstreamStorageError() from e
            urls.append(url)

        if urls:
            log.info("images_uploaded", count=len(urls), folder=self._folder)
        return urls

    async def discard(self, urls: Sequence[str]) -> None:
        """尽力删除已上传的图片，失败只记录日志"""
        for url in urls:
            try:
                await self._image_store.delete_image(url)
            except Exception as e:
                log.warning(
                    "image_cleanup_failed",
                    url=url,
                    error_type=type(e).__name__,
                )

    @staticmethod
    def _check_media_types(images: Sequence[ImageUpload]) -> None:
        invalid = [
            image.filename or f"#{i}"
            for i, image in enumerate(images)
            if not (image.content_type or "").lower().startswith("image/")
        ]
        if invalid:
            raise ValidationError(
                f"Only image files can be attached: {', '.join(invalid)}",
                fields=["images"],
            )
