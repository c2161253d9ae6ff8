"""ProfileService -- 用户头像读取/设置/移除

头像以 data URI（data:image/<type>;base64,...）或 http(s) URL 形式保存在用户记录上。
"""

import base64
import binascii
import re
from datetime import UTC, datetime

import structlog
from pracsphere.core.exceptions import ValidationError
from pracsphere.core.store import StoreGroup

from .task_service import require_owner, storage_errors

log = structlog.get_logger()

_DATA_URI_RE = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,(?P<payload>.+)$", re.DOTALL)


def validate_profile_image(image: str | None) -> str:
    """校验头像格式

    Raises:
        ValidationError: 缺失、非图片 data URI、base64 非法，或非 http(s) URL
    """
    if image is None or not image.strip():
        raise ValidationError("No image provided", fields=["image"])
    image = image.strip()

    if image.startswith(("http://", "https://")):
        return image

    match = _DATA_URI_RE.match(image)
    if match is None:
        raise ValidationError("Invalid image format", fields=["image"])
    try:
        base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid image format", fields=["image"]) from None
    return image


class ProfileService:
    """用户头像业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def get_profile_image(self, owner: str | None) -> str | None:
        owner = require_owner(owner)
        with storage_errors("get_profile_image"):
            user = await self._stores.user_store.get_user(owner)
        return user.profile_image if user else None

    async def set_profile_image(self, owner: str | None, image: str | None) -> None:
        """设置头像，用户记录不存在时创建"""
        owner = require_owner(owner)
        image = validate_profile_image(image)
        with storage_errors("set_profile_image"):
            await self._stores.user_store.set_profile_image(
                owner, image, datetime.now(UTC)
            )
        log.info("profile_image_updated", size=len(image))

    async def remove_profile_image(self, owner: str | None) -> None:
        owner = require_owner(owner)
        with storage_errors("remove_profile_image"):
            await self._stores.user_store.clear_profile_image(owner, datetime.now(UTC))
        log.info("profile_image_removed")
