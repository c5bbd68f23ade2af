"""Error taxonomy and result type for the keyed expiring store.

Store operations never raise to their callers. Failures are folded into a
`StoreResult` carrying an `ErrorKind`, while the exceptions below are only
raised (and caught) at the backend/serializer seams.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    INVALID_KEY = "invalid_key"
    PARSE_ERROR = "parse_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    BACKEND_UNAVAILABLE = "backend_unavailable"


class QuotaExceededError(Exception):
    """Raised by a backend when a write would exceed its capacity."""

    def __init__(self, key: str, required: int, quota: int) -> None:
        super().__init__(f"Quota exceeded writing {key!r}: {required} > {quota} bytes")
        self.key = key
        self.required = required
        self.quota = quota


class ParseError(ValueError):
    """Raised when a stored string is not a valid entry wrapper."""


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Any = None) -> "StoreResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, value: Any = None) -> "StoreResult":
        return cls(ok=False, value=value, error=error)

    def __bool__(self) -> bool:
        return self.ok
