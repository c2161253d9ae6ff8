"""PracSphere 异常体系

服务边界抛出的错误统一继承 PracsphereError，
由 gateway 的异常处理器映射为 HTTP 状态码与错误体。
"""


class PracsphereError(Exception):
    """基础异常"""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        """
        Args:
            message: 面向调用方的错误描述（不得包含内部细节）
        """
        super().__init__(message)
        self.message = message


class AuthenticationError(PracsphereError):
    """请求未携带可验证的用户身份"""

    code = "UNAUTHENTICATED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ValidationError(PracsphereError):
    """必填字段缺失或字段格式非法"""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        """
        Args:
            message: 错误描述
            fields: 出错的字段名列表
        """
        super().__init__(message)
        self.fields = fields or []


class NotFoundError(PracsphereError):
    """资源不存在或不属于当前用户

    两种情况刻意不做区分，避免泄露其他用户任务的存在性。
    """

    code = "TASK_NOT_FOUND"
    status_code = 404

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class UpstreamStorageError(PracsphereError):
    """对象存储或持久化层失败（连接失败、超时、写入失败等）

    message 仅为通用描述，原始异常通过 __cause__ 链保留并写入服务端日志。
    """

    code = "STORAGE_ERROR"
    status_code = 500

    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(message)


class ConflictError(PracsphereError):
    """并发写冲突（预留）

    当前更新语义为 last-write-wins，不会抛出此异常。
    """

    code = "CONFLICT"
    status_code = 409
