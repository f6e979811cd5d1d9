"""
errors.py
- Purpose: AppError used across services/repos for consistent errors.
- Pattern: raise AppError(...) in service/repo, handler converts to JSON response.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import status as http_status
from hep_companion.core.error_codes import ErrorCode
from hep_companion.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __str__(self) -> str:
        return self.message or getattr(self.reason, "value", self.reason)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


# Convenience constructors (optional but makes services cleaner)
def bad_request(reason: str = ErrorReason.INVALID_INPUT, *, code: ErrorCode = ErrorCode.VALIDATION_ERROR, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=code, reason=reason, status_code=http_status.HTTP_400_BAD_REQUEST, message=message, details=details)


def unauthorized(message: str | None = None, *, reason: str = ErrorReason.AUTH_REQUIRED) -> AppError:
    return AppError(code=ErrorCode.UNAUTHORIZED, reason=reason, status_code=http_status.HTTP_401_UNAUTHORIZED, message=message)


def forbidden(message: str | None = None, *, reason: str = ErrorReason.NOT_AUTHORIZED) -> AppError:
    return AppError(code=ErrorCode.FORBIDDEN, reason=reason, status_code=http_status.HTTP_403_FORBIDDEN, message=message)


def not_found(reason: str = ErrorReason.RESOURCE_NOT_FOUND, *, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.NOT_FOUND, reason=reason, status_code=http_status.HTTP_404_NOT_FOUND, message=message, details=details)


def conflict(reason: str = ErrorReason.ALREADY_EXISTS, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.CONFLICT, reason=reason, status_code=http_status.HTTP_409_CONFLICT, details=details)


def internal_error(reason: str = ErrorReason.UNKNOWN, *, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.INTERNAL_ERROR, reason=reason, status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, message=message, details=details)


def db_error(message: str, *, details: dict | None = None) -> AppError:
    return AppError(
        code=ErrorCode.DB_ERROR,
        reason=ErrorReason.DATABASE_UNAVAILABLE,
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        details=details,
    )
