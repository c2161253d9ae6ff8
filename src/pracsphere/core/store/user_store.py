"""UserStore SQLite 实现 -- 仅头像字段可写"""

import asyncio
from datetime import datetime

import aiosqlite

from ..models.user import User


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(
        self,
        conn: aiosqlite.Connection,
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        self._conn = conn
        self._write_lock = write_lock or asyncio.Lock()

    async def _write(self, sql: str, params: tuple) -> None:
        async with self._write_lock:
            try:
                await self._conn.execute(sql, params)
                await self._conn.commit()
            except Exception:
                await self._conn.rollback()
                raise

    async def get_user(self, email: str) -> User | None:
        """根据 email 查询用户"""
        cursor = await self._conn.execute(
            "SELECT email, name, profile_image, created_at, updated_at "
            "FROM users WHERE email = ?",
            (email,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return User(
            email=row[0],
            name=row[1],
            profile_image=row[2],
            created_at=datetime.fromisoformat(row[3]),
            updated_at=datetime.fromisoformat(row[4]) if row[4] else None,
        )

    async def set_profile_image(self, email: str, image: str, now: datetime) -> None:
        """写入头像，用户记录不存在时创建（upsert）"""
        await self._write(
            """
            INSERT INTO users (email, profile_image, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(email) DO UPDATE
            SET profile_image = excluded.profile_image,
                updated_at = excluded.updated_at
            """,
            (email, image, now.isoformat(), now.isoformat()),
        )

    async def clear_profile_image(self, email: str, now: datetime) -> None:
        """清除头像，用户记录不存在时为 no-op"""
        await self._write(
            "UPDATE users SET profile_image = NULL, updated_at = ? WHERE email = ?",
            (now.isoformat(), email),
        )
