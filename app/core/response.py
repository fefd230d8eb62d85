"""
File: app/core/response.py
Description: 统一响应信封（Unified Response Envelope）模型与辅助函数

本模块定义了全站统一的 API 响应格式。
所有 HTTP 接口必须遵循此契约返回数据。

信封字段:
- success: 前端快速判断成败的布尔标记 (序列化名 success)
- code / message: 业务码与人类可读消息
- data: 业务数据
- request_id / timestamp: 链路追踪

Created: 2025-11-24
Updated: 2026-03-02 (v2.4: 增加 success 布尔标记)
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ResponseBase(BaseModel):
    """
    响应基类
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    # 字段名避开 ResponseModel.success 类方法，对外以 "success" 输出
    is_success: bool = Field(default=True, alias="success", description="是否成功")
    code: str = Field(default="success", description="业务状态码")
    message: str = Field(default="Success", description="响应消息")
    request_id: str | None = Field(default=None, description="请求追踪ID")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="响应生成时间",
    )


class ResponseModel(ResponseBase, Generic[T]):
    """
    统一响应信封
    """

    data: T | None = Field(default=None, description="业务数据")

    @classmethod
    def success(
        cls,
        data: T | None = None,
        message: str = "Success",
        request_id: str | None = None,
    ) -> "ResponseModel[T]":
        """
        构造成功响应
        """
        # 强制将 Pydantic 模型转换为 JSON 安全的字典
        if hasattr(data, "model_dump"):
            data = cast(Any, data).model_dump(mode="json")

        return cls(
            is_success=True,
            code="success",
            message=message,
            data=data,
            request_id=request_id,
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        data: Any = None,
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        """
        构造失败响应
        """
        return cls(
            is_success=False,
            code=code,
            message=message,
            data=data,
            request_id=request_id,
        )

    def to_content(self) -> dict[str, Any]:
        """导出为可直接写入 ORJSONResponse 的字典 (使用对外字段名)"""
        return self.model_dump(mode="json", by_alias=True)
