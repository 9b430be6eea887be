"""
Field validators for untyped input crossing a trust boundary (backup
imports). Each validator returns the typed value or ``None``; missing or
malformed input is not an exceptional case here.
"""

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar, Union

from .text import sanitize

E = TypeVar("E", bound=Enum)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Largest timestamp (in ms) a browser Date can represent
MAX_EPOCH_MILLIS = 8.64e15


class FieldValidator:
    """Coerces one untyped value into one typed domain field."""

    @staticmethod
    def to_sanitized_string(value: Any) -> Optional[str]:
        """Sanitized, trimmed, non-empty string or ``None``."""
        if not isinstance(value, str):
            return None
        cleaned = sanitize(value).strip()
        return cleaned if cleaned else None

    @staticmethod
    def to_optional_sanitized_string(value: Any) -> Optional[str]:
        # Same contract; kept separate so optional fields read as such
        return FieldValidator.to_sanitized_string(value)

    @staticmethod
    def to_sanitized_string_list(value: Any) -> List[str]:
        """
        Sanitize every entry of a list, dropping the ones that reject and
        removing duplicates (first occurrence wins). Non-lists read as empty.
        """
        if not isinstance(value, list):
            return []
        cleaned = (FieldValidator.to_sanitized_string(entry) for entry in value)
        return list(dict.fromkeys(entry for entry in cleaned if entry))

    @staticmethod
    def to_number(value: Any) -> Optional[Union[int, float]]:
        """Finite number from a numeric value or a numeric string."""
        if isinstance(value, bool):
            return None

        if isinstance(value, int):
            # JSON integers are unbounded; past float range they are Infinity
            try:
                float(value)
            except OverflowError:
                return None
            return value

        if isinstance(value, (float, Decimal)):
            number = float(value)
            return number if math.isfinite(number) else None

        if isinstance(value, str):
            text = value.strip()
            if not text or "_" in text:
                return None
            try:
                number = float(text)
            except ValueError:
                return None
            return number if math.isfinite(number) else None

        return None

    @staticmethod
    def to_int(value: Any) -> Optional[int]:
        """Number validator followed by half-up rounding."""
        number = FieldValidator.to_number(value)
        if number is None:
            return None
        if isinstance(number, int):
            return number
        return int(math.floor(number + 0.5))

    @staticmethod
    def to_boolean(value: Any) -> Optional[bool]:
        """Only literal booleans; no truthy/falsy coercion."""
        if isinstance(value, bool):
            return value
        return None

    @staticmethod
    def to_date(value: Any) -> Optional[datetime]:
        """
        Timezone-aware UTC datetime from a datetime/date, an ISO-8601 string
        or epoch milliseconds. Naive values are read as UTC.
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)

        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

        if isinstance(value, bool):
            return None

        if isinstance(value, (int, float)):
            # Bound first: isfinite overflows on huge ints
            if abs(value) > MAX_EPOCH_MILLIS or not math.isfinite(value):
                return None
            try:
                return EPOCH + timedelta(milliseconds=value)
            except OverflowError:
                return None

        if isinstance(value, str):
            return FieldValidator._parse_iso_datetime(value)

        return None

    @staticmethod
    def _parse_iso_datetime(value: str) -> Optional[datetime]:
        text = value.strip()
        if not text:
            return None

        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"

        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        try:
            return parsed.astimezone(timezone.utc)
        except OverflowError:
            return None

    @staticmethod
    def to_enum(value: Any, enum_class: Type[E]) -> Optional[E]:
        """Member of ``enum_class`` for an exact tag value, else ``None``."""
        if isinstance(value, enum_class):
            return value
        if not isinstance(value, str):
            return None
        try:
            return enum_class(value)
        except ValueError:
            return None

    @staticmethod
    def is_mapping(value: Any) -> bool:
        return isinstance(value, dict)
