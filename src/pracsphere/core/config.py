"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、媒体文件目录、图片上传目录名等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PRACSPHERE_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "PRACSPHERE_DB_PATH",
        str(_get_base_dir() / "sqlite" / "pracsphere.db"),
    )


def get_media_dir() -> Path:
    """获取本地图片存储目录"""
    return Path(
        os.environ.get(
            "PRACSPHERE_MEDIA_DIR",
            str(_get_base_dir() / "media"),
        )
    )


# 任务图片上传的固定目录（对象存储中的逻辑 namespace）
TASK_IMAGE_FOLDER: str = "pracsphere-tasks"

# SQLite busy_timeout（毫秒）
SQLITE_BUSY_TIMEOUT_MS: int = int(
    os.environ.get("PRACSPHERE_SQLITE_BUSY_TIMEOUT_MS", "5000")
)

# Dashboard 各列表截取条数
DASHBOARD_LIST_LIMIT: int = 5
