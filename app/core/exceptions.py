"""
File: app/core/exceptions.py
Description: 业务异常类与全局异常处理器

本模块负责：
1. AppException：接受 BaseErrorCode 枚举的业务异常基类
2. 全局异常处理器：任何异常都转换为统一响应信封，不向调用方泄露内部细节
3. 日志级别随 HTTP 状态变化：
   - 2xx 业务结果 (links.not_linked / inventory.unavailable): INFO
   - 4xx 调用方错误: WARNING
   - 5xx 上游 / 存储故障: ERROR

注意：OpenID 回调接口自行捕获异常并重定向，不经过这里的 JSON 处理器。

Created: 2025-11-24
Updated: 2026-03-02 (按状态码分级记录，405 独立业务码)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.error_code import BaseErrorCode, SystemErrorCode
from app.core.logging import logger
from app.core.response import ResponseModel

# ------------------------------------------------------------------------------
# 1. 自定义业务异常类
# ------------------------------------------------------------------------------


class AppException(Exception):
    """
    应用基础异常类。

    用法示例:
        raise AppException(LinkError.STEAM_LINKED)
        raise AppException(InventoryError.PRIVATE, message="库存未公开")
    """

    def __init__(
        self,
        error: BaseErrorCode,
        message: str = "",
        data: Any = None,
    ):
        self.error = error
        self.http_status = error.http_status
        self.code = error.code
        self.message = message or error.msg
        self.data = data
        super().__init__(self.message)

    @property
    def reason(self) -> str:
        """不带领域前缀的错误标识 (用于重定向 query 参数)"""
        return self.error.reason


# ------------------------------------------------------------------------------
# 2. 辅助函数
# ------------------------------------------------------------------------------


def _get_request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _log_level(http_status: int) -> str:
    if http_status >= 500:
        return "ERROR"
    if http_status >= 400:
        return "WARNING"
    return "INFO"


def _simplify_errors(errors: Any) -> list[dict[str, Any]]:
    """
    精简 Pydantic 错误列表。
    ctx 中可能包含异常对象 (field_validator 抛出的 ValueError)，无法 JSON 序列化。
    """
    return [
        {
            "loc": list(err.get("loc", [])),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in errors
    ]


def _envelope(
    status_code: int,
    code: str,
    message: str,
    request_id: str,
    data: Any = None,
) -> ORJSONResponse:
    response_model = ResponseModel.fail(
        code=code, message=message, data=data, request_id=request_id
    )
    return ORJSONResponse(status_code=status_code, content=response_model.to_content())


# ------------------------------------------------------------------------------
# 3. 全局异常处理器 (Handlers)
# ------------------------------------------------------------------------------


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    """业务异常：直接映射为定义好的 HTTP 状态码和 Code"""
    request_id = _get_request_id(request)

    logger.bind(
        request_id=request_id,
        code=exc.code,
        http_status=exc.http_status,
        message=exc.message,
    ).log(_log_level(exc.http_status), "Business exception occurred")

    return _envelope(exc.http_status, exc.code, exc.message, request_id, exc.data)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """
    Pydantic 校验异常 (FastAPI 默认 422)
    映射目标: HTTP 400 / system.invalid_params，message 取第一个出错字段
    """
    request_id = _get_request_id(request)

    errors = _simplify_errors(exc.errors())
    first_error = errors[0] if errors else {}

    # 出错字段路径: body -> wallet_address
    loc = first_error.get("loc", [])
    field_name = str(loc[-1]) if loc else "unknown"
    readable_message = f"{field_name}: {first_error.get('msg', 'Invalid parameter')}"

    logger.bind(
        request_id=request_id,
        detail=readable_message,
        raw_errors=errors,
    ).warning("Request validation failed")

    return _envelope(
        SystemErrorCode.INVALID_PARAMS.http_status,
        SystemErrorCode.INVALID_PARAMS.code,
        readable_message,
        request_id,
        {"errors": errors},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """框架层面的 HTTP 异常 (路由不存在、方法不允许等)"""
    request_id = _get_request_id(request)

    if exc.status_code == SystemErrorCode.NOT_FOUND.http_status:
        code = SystemErrorCode.NOT_FOUND.code
    elif exc.status_code == SystemErrorCode.METHOD_NOT_ALLOWED.http_status:
        code = SystemErrorCode.METHOD_NOT_ALLOWED.code
    else:
        code = "system.http_error"

    logger.bind(
        request_id=request_id,
        status_code=exc.status_code,
        detail=str(exc.detail),
    ).warning("Framework HTTP exception occurred")

    return _envelope(exc.status_code, code, str(exc.detail), request_id)


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    未捕获的异常 (500)。
    完整堆栈只写入日志，响应中屏蔽内部细节。
    """
    request_id = _get_request_id(request)

    logger.opt(exception=exc).bind(request_id=request_id).error(
        "Unhandled system exception occurred"
    )

    return _envelope(
        SystemErrorCode.INTERNAL_ERROR.http_status,
        SystemErrorCode.INTERNAL_ERROR.code,
        SystemErrorCode.INTERNAL_ERROR.msg,
        request_id,
    )


# ------------------------------------------------------------------------------
# 4. 异常处理器注册函数
# ------------------------------------------------------------------------------


def register_exception_handlers(app: FastAPI) -> None:
    """统一注册所有异常处理器，应在 main.py 中调用。"""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore
    app.add_exception_handler(Exception, general_exception_handler)
