"""Registration API for declaring fields, mixins, filters and directives.

Usage:
    profile = (
        ValidationProfile("signup")
        .define_mixin("basic", {"required": 1, "max_length": 255})
        .define_field("login", {"mixin": "basic", "min_length": 3})
        .define_filter("no_dashes", lambda value: value.replace("-", ""))
        .define_field("phone", {"filters": ["trim", "no_dashes"]})
    )

    validator = profile.build(params=request_params)

Every build() hands the validator its own copy of the declarations, so
instances never share field state.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from validclass.exceptions import DeclarationError
from validclass.types import DirectiveDescriptor, DirectiveFn, FilterFn
from validclass.validator import Validator


class ValidationProfile:
    """An in-memory registry of declarations used to build validators."""

    def __init__(self, name: str = ""):
        self.name = name
        self.fields: dict[str, dict[str, Any]] = {}
        self.mixins: dict[str, dict[str, Any]] = {}
        self.filters: dict[str, FilterFn] = {}
        self.directives: dict[str, DirectiveDescriptor] = {}
        self.children: dict[str, ValidationProfile] = {}

    def define_field(self, name: str, spec: Mapping[str, Any]) -> ValidationProfile:
        self._check_new(self.fields, "Field", name)
        if not isinstance(spec, Mapping):
            raise DeclarationError(f"Field '{name}' must be declared with a mapping")
        self.fields[name] = dict(spec)
        return self

    def define_mixin(self, name: str, spec: Mapping[str, Any]) -> ValidationProfile:
        self._check_new(self.mixins, "Mixin", name)
        if not isinstance(spec, Mapping):
            raise DeclarationError(f"Mixin '{name}' must be declared with a mapping")
        self.mixins[name] = dict(spec)
        return self

    def define_filter(self, name: str, filter_fn: FilterFn) -> ValidationProfile:
        self._check_new(self.filters, "Filter", name)
        if not callable(filter_fn):
            raise DeclarationError(f"Filter '{name}' must be callable")
        self.filters[name] = filter_fn
        return self

    def define_directive(
        self,
        name: str,
        validator: DirectiveFn | None = None,
        *,
        mixin: bool = True,
        field: bool = True,
        multi: bool = False,
    ) -> ValidationProfile:
        """Declare a directive local to validators built from this profile.

        With a validator function the directive is checked at validation
        time; without one it is a plain setting readable by callbacks.
        """
        self._check_new(self.directives, "Directive", name)
        if validator is not None and not callable(validator):
            raise DeclarationError(f"Directive '{name}' validator must be callable")
        self.directives[name] = DirectiveDescriptor(
            name, mixin=mixin, field=field, multi=multi, validator=validator
        )
        return self

    def define_child(self, name: str, profile: ValidationProfile) -> ValidationProfile:
        """Register a profile reachable through Validator.child(name)."""
        self._check_new(self.children, "Child", name)
        self.children[name] = profile
        return self

    def update(self, other: ValidationProfile) -> ValidationProfile:
        """Add every declaration of another profile to this one."""
        for name, spec in other.fields.items():
            self.define_field(name, spec)
        for name, spec in other.mixins.items():
            self.define_mixin(name, spec)
        for name, filter_fn in other.filters.items():
            self.define_filter(name, filter_fn)
        for name, descriptor in other.directives.items():
            self._check_new(self.directives, "Directive", name)
            self.directives[name] = descriptor
        for name, child in other.children.items():
            self.define_child(name, child)
        return self

    def build(self, params: Mapping[str, Any] | None = None, **options: Any) -> Validator:
        """Create a validator over a private copy of these declarations.

        Keyword options are passed to Validator (ignore_unknown,
        report_unknown, hash_inflator, options).
        """
        return Validator(
            params=params,
            fields=copy.deepcopy(self.fields),
            mixins=copy.deepcopy(self.mixins),
            filters=dict(self.filters),
            directives=dict(self.directives),
            children=dict(self.children),
            **options,
        )

    @staticmethod
    def _check_new(registry: Mapping[str, Any], kind: str, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise DeclarationError(f"{kind} name must be a non-empty string")
        if name in registry:
            raise DeclarationError(f"{kind} '{name}' is already defined")
