from hep_companion.core.errors import AppError
from hep_companion.core.error_codes import ErrorCode
from hep_companion.core.error_reasons import ErrorReason

__all__ = ["AppError", "ErrorCode", "ErrorReason"]
