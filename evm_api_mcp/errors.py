"""Error types raised by the EVM API client."""

from enum import Enum


class ApiErrorCode(Enum):
    GENERIC_API_ERROR = "A0001"
    INVALID_ARGUMENT = "A0002"
    NOT_FOUND = "A0404"


class EvmApiError(Exception):
    """Raised when a request cannot be resolved or sent

    Args:
        code: ApiErrorCode classifying the failure
        message: Human readable message
    """

    def __init__(self, code: ApiErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code.value}] {message}")


__all__ = [
    "ApiErrorCode",
    "EvmApiError",
]
