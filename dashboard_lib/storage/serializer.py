from __future__ import annotations
import json
import math
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ParseError

MS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass
class StoredEntry:
    """One persisted value with its creation and expiry timestamps (ms)."""

    value: Any
    created: int
    expires: int

    @classmethod
    def create(cls, value: Any, now: int, expiration_days: float) -> "StoredEntry":
        if not _is_finite_number(expiration_days):
            raise ValueError(f"expiration_days must be a finite number, got {expiration_days!r}")
        return cls(value=value, created=now, expires=now + int(expiration_days * MS_PER_DAY))

    def is_expired(self, now: int) -> bool:
        return now > self.expires


class EntrySerializer(Protocol):
    """Convert entries to and from the backend's string values."""

    def dump(self, entry: StoredEntry) -> str: ...

    def load(self, data: str) -> StoredEntry: ...


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class JSONEntrySerializer:
    """Serializer for the `{"value", "created", "expires"}` wrapper.

    Output is compact JSON with keys in that order so that values written
    by the browser dashboard and by this package are interchangeable.
    """

    def dump(self, entry: StoredEntry) -> str:
        payload = {"value": entry.value, "created": entry.created, "expires": entry.expires}
        # NaN and Infinity are not JSON; the browser side would refuse to parse them.
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)

    def load(self, data: str) -> StoredEntry:
        try:
            raw = json.loads(data)
        except (TypeError, ValueError) as e:
            raise ParseError(f"not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise ParseError("expected a JSON object")
        if "value" not in raw:
            raise ParseError("missing 'value'")
        created, expires = raw.get("created"), raw.get("expires")
        if not _is_finite_number(created) or not _is_finite_number(expires):
            raise ParseError("missing or invalid 'created'/'expires' timestamps")
        return StoredEntry(value=raw["value"], created=int(created), expires=int(expires))
