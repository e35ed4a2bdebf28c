# prodledger/errors.py
"""
Error taxonomy and operation results.

Registry operations do not raise on rejected input. They return a Result
carrying either the success value or a numbered ErrorCode. The numbers are
stable and must not be reassigned.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    """Numbered failure codes returned by registry operations."""
    NOT_AUTHORIZED = 100
    INVALID_HASH = 101
    INVALID_ORIGIN = 102
    INVALID_PRODUCTION_DATE = 103
    INVALID_COMPLIANCE_DATA = 104
    PRODUCT_ALREADY_EXISTS = 105
    PRODUCT_NOT_FOUND = 106
    AUTHORITY_NOT_VERIFIED = 108
    INVALID_MIN_VALUE = 109
    INVALID_MAX_VALUE = 110
    INVALID_UPDATE_PARAM = 112
    MAX_PRODUCTS_EXCEEDED = 113
    INVALID_PRODUCT_TYPE = 114
    INVALID_QUALITY_RATING = 115
    INVALID_EXPIRY_PERIOD = 116
    INVALID_LOCATION = 117
    INVALID_CURRENCY = 118
    INVALID_BATCH_SIZE = 119
    TRANSFER_FAILED = 120


class LedgerError(Exception):
    """Raised when a failed Result is unwrapped or stored state is corrupt."""

    def __init__(self, code: Optional[ErrorCode], message: str = None):
        self.code = code
        if message is None:
            message = code.name if code is not None else "operation failed"
        super().__init__(message)


@dataclass(frozen=True)
class Result:
    """
    Outcome of a registry operation.

    Attributes:
        ok: True on success
        value: Success value, or the ErrorCode (register) / False (update,
            authority and fee setters) on failure
    """
    ok: bool
    value: Any

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(True, value)

    @classmethod
    def failure(cls, value: Any) -> "Result":
        return cls(False, value)

    @property
    def error(self) -> Optional[ErrorCode]:
        """The ErrorCode of a failed result, if it carries one."""
        if self.ok or not isinstance(self.value, ErrorCode):
            return None
        return self.value

    def unwrap(self) -> Any:
        """Return the success value or raise LedgerError."""
        if self.ok:
            return self.value
        raise LedgerError(self.error)

    def __bool__(self) -> bool:
        return self.ok
