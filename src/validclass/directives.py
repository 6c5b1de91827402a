"""Directive registry and built-in directive validators.

Every key allowed in a field or mixin declaration is a directive. A
directive is flagged as mixin-eligible, field-eligible and/or multi-valued;
validator-type directives also carry a check function:

    (argument, value, field, validator) -> bool

A check that returns False has already recorded its message through
``validator.error(field, message)``; the executor never adds another.
"""

import re
from functools import lru_cache
from typing import Any, Callable

from validclass.types import (
    DirectiveDescriptor,
    DirectiveFn,
    FieldSpec,
    is_blank,
    to_list,
)


# =============================================================================
# Helpers
# =============================================================================


def _plural(count: Any, singular: str, plural: str) -> str:
    return plural if int(count) > 1 else singular


def _bounds(argument: Any) -> tuple[int, int]:
    """Parse a range argument given as "min-max" or a (min, max) pair."""
    if isinstance(argument, str):
        low, _, high = argument.partition("-")
        return int(low), int(high)
    low, high = argument
    return int(low), int(high)


def _range_label(argument: Any) -> str:
    if isinstance(argument, str):
        return argument
    low, high = argument
    return f"{low}-{high}"


@lru_cache(maxsize=256)
def mask_to_regex(mask: str) -> re.Pattern[str]:
    """Compile a pattern mask: # is a digit, X is a letter, space is literal."""
    parts = []
    for char in mask:
        if char == "#":
            parts.append(r"\d")
        elif char == "X":
            parts.append("[a-zA-Z]")
        elif char == " ":
            parts.append(" ")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


def _options(argument: Any) -> list[str]:
    if isinstance(argument, str):
        return re.split(r",\s?", argument)
    return [str(option) for option in argument]


def _field_handle(validator: Any, name: str) -> str:
    other = validator.fields.get(name)
    return other.handle if other is not None else name


# =============================================================================
# Length Validators
# =============================================================================


def validate_between(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    low, high = _bounds(argument)
    length = len(str(value))
    if length and not low <= length <= high:
        validator.error(
            field,
            f"{field.handle} must contain between {_range_label(argument)} characters",
        )
        return False
    return True


def validate_length(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    length = len(str(value))
    if length and length != int(argument):
        characters = _plural(argument, "character", "characters")
        validator.error(
            field, f"{field.handle} must contain exactly {argument} {characters}"
        )
        return False
    return True


def validate_max_length(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    if len(str(value)) > int(argument):
        characters = _plural(argument, "character", "characters")
        validator.error(
            field, f"{field.handle} must contain {argument} {characters} or less"
        )
        return False
    return True


def validate_min_length(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    if len(str(value)) < int(argument):
        characters = _plural(argument, "character", "characters")
        validator.error(
            field, f"{field.handle} must contain {argument} or more {characters}"
        )
        return False
    return True


# =============================================================================
# Content Validators
# =============================================================================


def validate_matches(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    other = validator.params.get(argument)
    if is_blank(other):
        other = ""
    if str(value) != str(other):
        validator.error(
            field,
            f"{field.handle} does not match {_field_handle(validator, argument)}",
        )
        return False
    return True


def validate_options(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    options = _options(argument)
    if str(value) not in options:
        validator.error(field, f"{field.handle} must be " + " or ".join(options))
        return False
    return True


def validate_pattern(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    if isinstance(argument, re.Pattern):
        regex, shown = argument, argument.pattern
    else:
        regex, shown = mask_to_regex(str(argument)), argument
    if not regex.search(str(value)):
        validator.error(field, f"{field.handle} does not match the pattern {shown}")
        return False
    return True


def validate_depends_on(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
    passed = True
    for name in to_list(argument):
        if is_blank(validator.params.get(name)):
            validator.error(
                field, f"{field.handle} requires {_field_handle(validator, name)}"
            )
            passed = False
    return passed


# =============================================================================
# Character Class Validators
# =============================================================================


def _count_validator(
    counter: Callable[[str], int],
    noun: str,
    at_least: bool,
) -> DirectiveFn:
    """Build a min_/max_ validator over a character count."""

    def check(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
        count = counter(str(value))
        limit = int(argument)
        kind = _plural(limit, noun, noun + "s")
        if at_least and count < limit:
            validator.error(
                field, f"{field.handle} must contain at least {limit} {kind}"
            )
            return False
        if not at_least and count > limit:
            validator.error(
                field, f"{field.handle} must contain no more than {limit} {kind}"
            )
            return False
        return True

    return check


def _count_alpha(value: str) -> int:
    return len(re.findall(r"[A-Za-z]", value))


def _count_digits(value: str) -> int:
    return len(re.findall(r"\d", value))


def _count_symbols(value: str) -> int:
    return len(re.findall(r"[^A-Za-z0-9\s]", value))


def _sum_validator(at_least: bool) -> DirectiveFn:
    def check(argument: Any, value: Any, field: FieldSpec, validator: Any) -> bool:
        try:
            number = float(value)
        except (TypeError, ValueError):
            validator.error(field, f"{field.handle} must be a number")
            return False

        limit = float(argument)
        if at_least and number < limit:
            validator.error(field, f"{field.handle} must be at least {argument}")
            return False
        if not at_least and number > limit:
            validator.error(field, f"{field.handle} must be no more than {argument}")
            return False
        return True

    return check


# =============================================================================
# Registry
# =============================================================================


BUILTIN_DIRECTIVES: list[DirectiveDescriptor] = [
    DirectiveDescriptor("alias", mixin=False, field=True, multi=True),
    DirectiveDescriptor("between", mixin=True, validator=validate_between),
    DirectiveDescriptor("default", mixin=True),
    DirectiveDescriptor(
        "depends_on", mixin=False, multi=True, validator=validate_depends_on
    ),
    DirectiveDescriptor("error"),
    DirectiveDescriptor("errors"),
    DirectiveDescriptor("filter", mixin=True, multi=True),
    DirectiveDescriptor("filters", mixin=True, multi=True),
    DirectiveDescriptor("label"),
    DirectiveDescriptor("length", mixin=True, validator=validate_length),
    DirectiveDescriptor("matches", mixin=True, validator=validate_matches),
    DirectiveDescriptor(
        "max_alpha", mixin=True, validator=_count_validator(_count_alpha, "alphabetic character", False)
    ),
    DirectiveDescriptor(
        "max_digits", mixin=True, validator=_count_validator(_count_digits, "digit", False)
    ),
    DirectiveDescriptor("max_length", mixin=True, validator=validate_max_length),
    DirectiveDescriptor("max_sum", mixin=True, validator=_sum_validator(False)),
    DirectiveDescriptor(
        "max_symbols", mixin=True, validator=_count_validator(_count_symbols, "symbol", False)
    ),
    DirectiveDescriptor(
        "min_alpha", mixin=True, validator=_count_validator(_count_alpha, "alphabetic character", True)
    ),
    DirectiveDescriptor(
        "min_digits", mixin=True, validator=_count_validator(_count_digits, "digit", True)
    ),
    DirectiveDescriptor("min_length", mixin=True, validator=validate_min_length),
    DirectiveDescriptor("min_sum", mixin=True, validator=_sum_validator(True)),
    DirectiveDescriptor(
        "min_symbols", mixin=True, validator=_count_validator(_count_symbols, "symbol", True)
    ),
    DirectiveDescriptor("mixin", multi=True),
    DirectiveDescriptor("mixin_field", multi=True),
    DirectiveDescriptor("name"),
    DirectiveDescriptor("options", mixin=True, validator=validate_options),
    DirectiveDescriptor("pattern", mixin=True, validator=validate_pattern),
    DirectiveDescriptor("required", mixin=True),
    DirectiveDescriptor("validation"),
    DirectiveDescriptor("value", mixin=True),
]


class DirectiveRegistry:
    """Process-wide table of known directives.

    Built-in directives are registered by register_builtin_directives();
    applications add their own with register() or the @directive decorator
    before creating validators.

    Example:
        @directive("even")
        def check_even(argument, value, field, validator):
            if int(value) % 2:
                validator.error(field, f"{field.handle} must be even")
                return False
            return True
    """

    _directives: dict[str, DirectiveDescriptor] = {}

    @classmethod
    def register(cls, descriptor: DirectiveDescriptor) -> None:
        """Register a directive.

        Idempotent - re-registering the same name is a no-op.
        """
        if descriptor.name in cls._directives:
            return
        cls._directives[descriptor.name] = descriptor

    @classmethod
    def get(cls, name: str) -> DirectiveDescriptor:
        """Get a registered directive.

        Raises:
            ValueError: If the directive is not registered
        """
        if name not in cls._directives:
            raise ValueError(f"Directive '{name}' is not registered")
        return cls._directives[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._directives

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._directives.keys())

    @classmethod
    def all(cls) -> dict[str, DirectiveDescriptor]:
        """Snapshot of every registered directive."""
        return dict(cls._directives)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._directives.clear()


def register_builtin_directives() -> None:
    for descriptor in BUILTIN_DIRECTIVES:
        DirectiveRegistry.register(descriptor)


def directive(
    name: str,
    *,
    mixin: bool = True,
    field: bool = True,
    multi: bool = False,
) -> Callable[[DirectiveFn], DirectiveFn]:
    """Decorator to register a validator-type directive.

    Usage:
        @directive("between_hours")
        def between_hours(argument, value, field, validator):
            ...
    """

    def decorator(fn: DirectiveFn) -> DirectiveFn:
        DirectiveRegistry.register(
            DirectiveDescriptor(name, mixin=mixin, field=field, multi=multi, validator=fn)
        )
        return fn

    return decorator
