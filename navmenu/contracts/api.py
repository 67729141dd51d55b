from __future__ import annotations

from typing import Any

from .errors import ErrorCode, map_exception_to_error
from .responses import ApiMetaModel, fail, ok


def success_response(
    data: Any = None,
    *,
    meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return ok(data, meta=ApiMetaModel(**(meta or {})))


def error_response(
    code: ErrorCode,
    message: str,
    *,
    details: dict[str, Any] | None = None,
    meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return fail(
        code,
        message,
        details=details,
        meta=ApiMetaModel(**(meta or {})),
    )


def exception_response(exc: Exception, *, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    code, message, details = map_exception_to_error(exc)
    return error_response(code, message, details=details, meta=meta)
