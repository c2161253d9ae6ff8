"""异常处理器 -- 将 PracsphereError 体系映射为 HTTP 错误响应

错误体格式：{"error": {"code": ..., "message": ...}}
"""

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pracsphere.core.exceptions import (
    PracsphereError,
    UpstreamStorageError,
    ValidationError,
)
from starlette.requests import Request
from starlette.responses import JSONResponse

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, **extra}},
    )


async def handle_pracsphere_error(request: Request, exc: PracsphereError) -> JSONResponse:
    if isinstance(exc, UpstreamStorageError):
        # 原始异常已在抛出点记录，这里只补充请求维度信息
        log.error(
            "upstream_storage_error",
            cause_type=type(exc.__cause__).__name__ if exc.__cause__ else None,
        )
    else:
        log.info("request_rejected", code=exc.code, status_code=exc.status_code)

    extra = {}
    if isinstance(exc, ValidationError) and exc.fields:
        extra["fields"] = exc.fields
    return error_response(exc.status_code, exc.code, exc.message, **extra)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """请求体结构错误（非法 JSON、类型不匹配）统一返回 400"""
    fields = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()]
    log.info("request_rejected", code=ValidationError.code, status_code=400)
    return error_response(
        400,
        ValidationError.code,
        "Malformed request body",
        fields=[f for f in fields if f],
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """未预期异常：记录堆栈，对外只返回通用错误体"""
    log.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
    return error_response(500, PracsphereError.code, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PracsphereError, handle_pracsphere_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
