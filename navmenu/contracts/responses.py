from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from .errors import ErrorCode

T = TypeVar("T")


class ApiErrorModel(BaseModel):
    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ApiMetaModel(BaseModel):
    trace_id: str | None = None
    principal: str | None = None
    # "hit" when the per-principal tree came from cache, "rebuilt" otherwise.
    cache: str | None = None


class ApiEnvelope(BaseModel, Generic[T]):
    status: str
    data: T | None
    error: ApiErrorModel | None
    meta: ApiMetaModel = Field(default_factory=ApiMetaModel)


def ok(data: T = None, *, meta: ApiMetaModel | None = None) -> dict[str, Any]:
    return ApiEnvelope[T](
        status="ok",
        data=data,
        error=None,
        meta=meta or ApiMetaModel(),
    ).model_dump(by_alias=True)


def fail(
    code: ErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
    meta: ApiMetaModel | None = None,
) -> dict[str, Any]:
    return ApiEnvelope[Any](
        status="error",
        data=None,
        error=ApiErrorModel(code=code.value, message=message, details=details or {}),
        meta=meta or ApiMetaModel(),
    ).model_dump(by_alias=True)
