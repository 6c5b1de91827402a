"""Core types for validclass.

This module defines the records the engine works with:
- FieldSpec: a declared field with its resolved directives and per-run state
- MixinSpec: a reusable bundle of directives
- DirectiveDescriptor: registry metadata for a directive name
- HashInflatorConfig: delimiters used to flatten nested parameters
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable


# Directive validator signature: (argument, value, field, validator) -> bool
DirectiveFn = Callable[[Any, Any, "FieldSpec", Any], bool]

# Filter signature: (value) -> value
FilterFn = Callable[[Any], Any]


class Toggle(Enum):
    """Per-call override of a field's required directive."""

    NONE = ""
    REQUIRED = "+"
    OPTIONAL = "-"

    @classmethod
    def parse(cls, target: str) -> tuple[str, "Toggle"]:
        """Split a validate() target like "+name" into ("name", REQUIRED)."""
        if target[:1] == cls.REQUIRED.value:
            return target[1:], cls.REQUIRED
        if target[:1] == cls.OPTIONAL.value:
            return target[1:], cls.OPTIONAL
        return target, cls.NONE


def to_list(value: Any) -> list[Any]:
    """Normalize a scalar-or-sequence directive value to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def unique(values: Iterable[Any]) -> list[Any]:
    """Drop duplicates, keeping the first occurrence of each value."""
    result: list[Any] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


def is_blank(value: Any) -> bool:
    """True for values treated as "no data": undefined or empty string."""
    return value is None or (isinstance(value, str) and value == "")


def has_value(value: Any) -> bool:
    """True when directive validators should run on an optional field."""
    return not is_blank(value) and value is not False


@dataclass(frozen=True)
class DirectiveDescriptor:
    """Registry entry for a directive.

    Attributes:
        name: Directive key as used in field and mixin declarations
        mixin: May appear in a mixin (and be copied by mixin_field)
        field: May appear in a field declaration
        multi: Values accumulate across mixins instead of being skipped
        validator: Check run at validation time; must record its own error
    """

    name: str
    mixin: bool = False
    field: bool = True
    multi: bool = False
    validator: DirectiveFn | None = None


@dataclass
class MixinSpec:
    """A named template of directives applied through the mixin directive."""

    name: str
    directives: dict[str, Any] = field(default_factory=dict)


@dataclass
class FieldSpec:
    """A declared field.

    ``directives`` holds the resolved declaration (after mixins and
    mixin_field copies). ``value``, ``toggle`` and ``errors`` are per-run
    state and are reset at the start of every validate() call.
    """

    name: str
    directives: dict[str, Any] = field(default_factory=dict)
    value: Any = None
    toggle: Toggle = Toggle.NONE
    errors: list[str] = field(default_factory=list)

    @property
    def label(self) -> str | None:
        return self.directives.get("label")

    @property
    def handle(self) -> str:
        """Name used in generated messages."""
        return self.label or self.name

    @property
    def error(self) -> str | None:
        """Configured message that replaces any generated one."""
        message = self.directives.get("error")
        if message is None:
            message = self.directives.get("errors")
        return message

    @property
    def required(self) -> bool:
        return bool(self.directives.get("required"))

    @property
    def is_required(self) -> bool:
        """The required flag after applying this run's toggle."""
        if self.toggle is Toggle.REQUIRED:
            return True
        if self.toggle is Toggle.OPTIONAL:
            return False
        return self.required

    @property
    def aliases(self) -> list[str]:
        return to_list(self.directives.get("alias"))

    @property
    def filters(self) -> list[Any]:
        return to_list(self.directives.get("filters"))

    @property
    def validation(self) -> Callable[..., Any] | None:
        return self.directives.get("validation")

    @property
    def default(self) -> Any:
        if "default" in self.directives:
            return self.directives["default"]
        return self.directives.get("value")

    def reset(self) -> None:
        """Clear per-run state."""
        self.value = None
        self.toggle = Toggle.NONE
        self.errors = []


@dataclass
class HashInflatorConfig:
    """Delimiters used to flatten nested parameters into dotted keys."""

    hash_delimiter: str = "."
    array_delimiter: str = ":"
    escape_sequence: str = "\\"

    _KEYS = {
        "hash_delimiter": "hash_delimiter",
        "hashDelimiter": "hash_delimiter",
        "array_delimiter": "array_delimiter",
        "arrayDelimiter": "array_delimiter",
        "escape_sequence": "escape_sequence",
        "escapeSequence": "escape_sequence",
    }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "HashInflatorConfig":
        """Create config from snake_case or camelCase option keys."""
        options: dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key not in cls._KEYS:
                raise ValueError(f"Unknown hash inflator option '{key}'")
            options[cls._KEYS[key]] = value
        config = cls(**options)
        if not config.hash_delimiter or not config.array_delimiter:
            raise ValueError("Hash and array delimiters must be non-empty")
        if config.hash_delimiter == config.array_delimiter:
            raise ValueError("Hash and array delimiters must differ")
        return config
