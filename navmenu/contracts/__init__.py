"""Standardized API contracts."""

from .api import error_response, exception_response, success_response
from .errors import ErrorCode, map_exception_to_error
from .responses import ApiEnvelope, ApiErrorModel, ApiMetaModel, fail, ok

__all__ = [
    "ApiEnvelope",
    "ApiErrorModel",
    "ApiMetaModel",
    "ErrorCode",
    "error_response",
    "exception_response",
    "fail",
    "map_exception_to_error",
    "ok",
    "success_response",
]
