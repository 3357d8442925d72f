"""Error types raised by confsync."""

from typing import Any, Mapping


class ConfigurationError(ValueError):
    """Raised when settings are invalid at construction time."""


class RecordFieldError(TypeError):
    """Raised when a feed record holds a field of an unexpected kind."""

    def __init__(self, key: str, expected: str, value: Any, record: Mapping[str, Any]) -> None:
        self.key = key
        self.expected = expected
        self.value = value
        self.record = record
        super().__init__(
            f"Field {key!r} expected {expected}, got {type(value).__name__} ({value!r}) in record {dict(record)!r}"
        )
