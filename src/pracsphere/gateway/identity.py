"""Identity Context -- 从请求中解析已验证的用户身份

凭证校验、OAuth、会话签发都由上游身份代理完成，
这里只读取代理写入的身份头（默认 X-Forwarded-Email）。
"""

import structlog
from pracsphere.core.exceptions import AuthenticationError
from starlette.requests import Request


class HeaderIdentityResolver:
    """基于请求头的身份解析"""

    def __init__(self, header_name: str = "X-Forwarded-Email") -> None:
        self._header_name = header_name

    @property
    def header_name(self) -> str:
        return self._header_name

    def resolve(self, request: Request) -> str:
        """返回 owner 标识（邮箱统一小写）

        Raises:
            AuthenticationError: 身份头缺失或为空
        """
        value = request.headers.get(self._header_name, "").strip()
        if not value:
            raise AuthenticationError()
        owner = value.lower()
        structlog.contextvars.bind_contextvars(owner=owner)
        return owner
