from __future__ import annotations

from enum import Enum
from typing import Any

from ..services.menu.errors import InvalidMenuEntry, InvalidSourceOptions, MenuError


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_PRINCIPAL = "INVALID_PRINCIPAL"
    NOT_FOUND = "NOT_FOUND"
    CONFIG_ERROR = "CONFIG_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def map_exception_to_error(exc: Exception) -> tuple[ErrorCode, str, dict[str, Any] | None]:
    msg = str(exc) or exc.__class__.__name__
    if isinstance(exc, (InvalidMenuEntry, InvalidSourceOptions)):
        return ErrorCode.INVALID_INPUT, msg, {"exception_type": exc.__class__.__name__}
    if isinstance(exc, MenuError):
        return ErrorCode.CONFIG_ERROR, msg, {"exception_type": exc.__class__.__name__}
    lower = msg.lower()
    if "not found" in lower:
        return ErrorCode.NOT_FOUND, msg, None
    if "redis" in lower or "cache" in lower:
        return ErrorCode.CACHE_ERROR, msg, None
    if "missing" in lower or "config" in lower:
        return ErrorCode.CONFIG_ERROR, msg, None
    return ErrorCode.INTERNAL_ERROR, msg, {"exception_type": exc.__class__.__name__}
