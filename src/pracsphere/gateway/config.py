"""GatewayConfig -- Gateway 配置加载

从环境变量加载身份头、图片存储、时区等配置，
非法值记录告警后回退默认值，不阻塞启动。
"""

import os
from datetime import UTC, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

_TRUE_VALUES = ("1", "true", "yes", "on")


class GatewayConfig(BaseModel):
    """Gateway 配置 -- 从环境变量加载

    环境变量:
        PRACSPHERE_IDENTITY_HEADER: 上游身份代理写入的已验证身份头
        PRACSPHERE_IMAGE_STORE: 图片存储模式（local/http）
        PRACSPHERE_IMAGE_UPLOAD_URL: http 模式上传地址
        PRACSPHERE_IMAGE_UPLOAD_KEY: http 模式访问密钥
        PRACSPHERE_IMAGE_UPLOAD_TIMEOUT_S: 单次上传超时（秒，默认 30）
        PRACSPHERE_IMAGE_CLEANUP_ON_FAILURE: 批量上传失败时是否删除已上传图片
        PRACSPHERE_PUBLIC_BASE_URL: local 模式生成图片 URL 的前缀
        PRACSPHERE_TIMEZONE: 统计时 "今天" 所在时区
    """

    identity_header: str = Field(
        default="X-Forwarded-Email",
        description="已验证身份请求头",
    )
    image_store: Literal["local", "http"] = Field(
        default="local",
        description="图片存储模式：local / http",
    )
    image_upload_url: str = Field(default="", description="http 模式上传地址")
    image_upload_key: SecretStr = Field(
        default=SecretStr(""),
        description="http 模式访问密钥",
    )
    image_upload_timeout_s: float = Field(
        default=30,
        gt=0,
        description="单次图片上传超时（秒）",
    )
    image_cleanup_on_failure: bool = Field(
        default=True,
        description="批量上传中途失败时删除本批已上传的图片",
    )
    public_base_url: str = Field(default="", description="本地图片 URL 前缀")
    timezone: str = Field(default="UTC", description="IANA 时区名")

    def zone(self) -> tzinfo:
        if self.timezone == "UTC":
            return UTC
        return ZoneInfo(self.timezone)


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载 Gateway 配置

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("PRACSPHERE_IDENTITY_HEADER"):
        kwargs["identity_header"] = val

    if val := os.environ.get("PRACSPHERE_IMAGE_STORE"):
        if val in ("local", "http"):
            kwargs["image_store"] = val
        else:
            log.warning(
                "invalid_image_store_config",
                env_var="PRACSPHERE_IMAGE_STORE",
                value=val,
                fallback="local",
            )

    if val := os.environ.get("PRACSPHERE_IMAGE_UPLOAD_URL"):
        kwargs["image_upload_url"] = val

    if val := os.environ.get("PRACSPHERE_IMAGE_UPLOAD_KEY"):
        kwargs["image_upload_key"] = SecretStr(val)

    if val := os.environ.get("PRACSPHERE_IMAGE_UPLOAD_TIMEOUT_S"):
        try:
            timeout = float(val)
            if timeout <= 0:
                raise ValueError(val)
            kwargs["image_upload_timeout_s"] = timeout
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="PRACSPHERE_IMAGE_UPLOAD_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    if val := os.environ.get("PRACSPHERE_IMAGE_CLEANUP_ON_FAILURE"):
        kwargs["image_cleanup_on_failure"] = val.strip().lower() in _TRUE_VALUES

    if val := os.environ.get("PRACSPHERE_PUBLIC_BASE_URL"):
        kwargs["public_base_url"] = val.rstrip("/")

    if val := os.environ.get("PRACSPHERE_TIMEZONE"):
        try:
            ZoneInfo(val)
            kwargs["timezone"] = val
        except (ZoneInfoNotFoundError, ValueError):
            log.warning(
                "invalid_timezone_config",
                env_var="PRACSPHERE_TIMEZONE",
                value=val,
                fallback="UTC",
            )

    return GatewayConfig(**kwargs)
