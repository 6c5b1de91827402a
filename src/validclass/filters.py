"""Filters: string transforms applied to a parameter before validation.

Filters run in declaration order on string values only. Built-in filters:
- alpha, alphanumeric, numeric, decimal: strip disallowed characters
- lowercase, uppercase, capitalize, titlecase: case changes
- trim, strip: whitespace cleanup
"""

import re
from typing import Any, Mapping

from validclass.types import FilterFn


def alpha(value: str) -> str:
    return re.sub(r"[^A-Za-z]", "", value)


def alphanumeric(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "", value)


def capitalize(value: str) -> str:
    """Uppercase the first letter, and the first letter after every ". "."""
    value = value[:1].upper() + value[1:]
    return re.sub(r"\.\s+([a-z])", lambda m: ". " + m.group(1).upper(), value)


def decimal(value: str) -> str:
    return re.sub(r"[^0-9.,]", "", value)


def lowercase(value: str) -> str:
    return value.lower()


def numeric(value: str) -> str:
    return re.sub(r"\D", "", value)


def strip(value: str) -> str:
    """Collapse whitespace runs to one space and trim the ends."""
    return re.sub(r"\s+", " ", value).strip()


def titlecase(value: str) -> str:
    words = re.split(r"\s", value.lower())
    while words and words[-1] == "":
        words.pop()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def trim(value: str) -> str:
    return value.strip()


def uppercase(value: str) -> str:
    return value.upper()


BUILTIN_FILTERS: dict[str, FilterFn] = {
    "alpha": alpha,
    "alphanumeric": alphanumeric,
    "capitalize": capitalize,
    "decimal": decimal,
    "lowercase": lowercase,
    "numeric": numeric,
    "strip": strip,
    "titlecase": titlecase,
    "trim": trim,
    "uppercase": uppercase,
}


class FilterRegistry:
    """Process-wide registry of named filters.

    Example:
        FilterRegistry.register("digits_only", lambda v: re.sub(r"\\D", "", v))
    """

    _filters: dict[str, FilterFn] = {}

    @classmethod
    def register(cls, name: str, filter_fn: FilterFn) -> None:
        """Register a filter by name.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._filters:
            return
        cls._filters[name] = filter_fn

    @classmethod
    def get(cls, name: str) -> FilterFn:
        if name not in cls._filters:
            raise ValueError(f"Filter '{name}' is not registered")
        return cls._filters[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._filters

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._filters.keys())

    @classmethod
    def all(cls) -> dict[str, FilterFn]:
        """Snapshot of every registered filter."""
        return dict(cls._filters)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._filters.clear()


def register_builtin_filters() -> None:
    for name, filter_fn in BUILTIN_FILTERS.items():
        FilterRegistry.register(name, filter_fn)


def apply_filters(value: Any, filters: list[Any], available: Mapping[str, FilterFn]) -> Any:
    """Run each filter over value in order.

    Entries are filter names looked up in ``available`` or inline callables.
    Names missing from ``available`` are skipped; construction has already
    reported them. Non-string values are returned untouched.
    """
    if not isinstance(value, str):
        return value

    for entry in filters:
        filter_fn = entry if callable(entry) else available.get(entry)
        if filter_fn is None:
            continue
        value = filter_fn(value)
    return value
