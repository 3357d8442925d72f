"""Field extraction helpers for untyped feed records.

Feed records are plain ``dict`` objects decoded from JSON. Every helper here
treats a missing key and an explicit ``null`` the same way: the result is
``None``. A value of the wrong kind is a feed contract violation and raises
``RecordFieldError``.
"""

from numbers import Number
from typing import Any, Callable, Mapping, TypeVar

from confsync.errors import RecordFieldError

T = TypeVar("T")

Record = Mapping[str, Any]

KIND_NAMES = {
    str: "text",
    Number: "number",
    bool: "boolean",
    Mapping: "object",
    list: "list",
}


def _matches(value: Any, kind: type) -> bool:
    if kind is Number and isinstance(value, bool):
        return False
    return isinstance(value, kind)


def retrieve_value(record: Record, key: str, kind: type, converter: Callable[[Any], T] | None = None) -> Any:
    """Read ``key`` from ``record``, checking it against ``kind``.

    Returns ``None`` when the field is absent, otherwise the value passed
    through ``converter`` when one is given.
    """
    value = record.get(key)
    if value is None:
        return None
    if not _matches(value, kind):
        raise RecordFieldError(key, KIND_NAMES.get(kind, kind.__name__), value, record)
    return converter(value) if converter else value


def to_identifier(value: Any) -> str:
    """Normalize a numeric or textual identifier to its string form."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def retrieve_identifier(record: Record, key: str) -> str | None:
    """Read an identifier that may arrive either as a number or as text."""
    value = record.get(key)
    if value is None:
        return None
    if isinstance(value, str) or _matches(value, Number):
        return to_identifier(value)
    raise RecordFieldError(key, "identifier", value, record)


def retrieve_records(record: Record, key: str) -> list[Record]:
    """Read a list of nested records, rejecting non-object entries."""
    items = retrieve_value(record, key, list)
    if items is None:
        return []
    for item in items:
        if not isinstance(item, Mapping):
            raise RecordFieldError(key, "list of objects", item, record)
    return items


def reference_id(record: Record, id_key: str, object_key: str) -> str | None:
    """Resolve a cross reference given either as a bare id or as an embedded object."""
    return alternatives(
        # either by direct reference to the id
        retrieve_identifier(record, id_key),
        # or by having the referenced object as value
        retrieve_value(record, object_key, Mapping, lambda m: retrieve_identifier(m, "id")),
    )


def alternatives(*values: T | None) -> T | None:
    """Return the first value that is not ``None``."""
    for value in values:
        if value is not None:
            return value
    return None


def process_value(value: T | None, predicate: Callable[[T], bool], consumer: Callable[[T], Any]) -> None:
    """Hand ``value`` to ``consumer`` when it is present and passes ``predicate``."""
    if value is not None and predicate(value):
        consumer(value)


def as_records(payload: Any) -> list[Record]:
    """Interpret a decoded response as a list of records.

    Anything other than a list is treated as no data. Entries that are not
    objects are dropped.
    """
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, Mapping)]


def as_record(payload: Any) -> Record | None:
    """Interpret a decoded response as a single record, or ``None``."""
    return payload if isinstance(payload, Mapping) else None
