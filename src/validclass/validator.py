"""The validator instance: declarations, parameters and the validate() run.

Usage:
    validator = Validator(
        params={"login": "admin", "password": "secret"},
        fields={
            "login": {"required": 1, "min_length": 3},
            "password": {"mixin": "secret", "label": "Password"},
        },
        mixins={"secret": {"required": 1, "min_length": 5}},
    )

    if not validator.validate("login", "password"):
        print(validator.errors_to_string())

Specs are resolved once, at construction. Every validate() call resets
per-field state, picks its target fields, then filters and checks each one.
Alias moves made during a run are undone afterwards; filtered values are
kept.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping

from validclass.aliases import AliasResolver
from validclass.config import ValidatorOptions
from validclass.directives import DirectiveRegistry, register_builtin_directives
from validclass.errors import ErrorCollector
from validclass.exceptions import DeclarationError, UnknownFieldError
from validclass.filters import FilterRegistry, apply_filters, register_builtin_filters
from validclass.flatten import HashFlattener, is_nested
from validclass.merger import SpecMerger
from validclass.types import (
    DirectiveDescriptor,
    FieldSpec,
    FilterFn,
    HashInflatorConfig,
    Toggle,
    has_value,
    is_blank,
    unique,
)

logger = logging.getLogger(__name__)

_MISSING = object()


class Validator:
    """Validates one parameter set against declared fields and mixins.

    Instances are not thread-safe: validate() mutates per-field state, so
    concurrent calls must be serialized or use separate instances.
    """

    def __init__(
        self,
        params: Mapping[str, Any] | None = None,
        fields: Mapping[str, Mapping[str, Any]] | None = None,
        mixins: Mapping[str, Mapping[str, Any]] | None = None,
        filters: Mapping[str, FilterFn] | None = None,
        directives: Mapping[str, DirectiveDescriptor] | None = None,
        ignore_unknown: bool | None = None,
        report_unknown: bool | None = None,
        hash_inflator: HashInflatorConfig | Mapping[str, Any] | None = None,
        children: Mapping[str, Any] | None = None,
        options: ValidatorOptions | None = None,
    ):
        register_builtin_directives()
        register_builtin_filters()

        options = options or ValidatorOptions()
        self.ignore_unknown = (
            options.ignore_unknown if ignore_unknown is None else ignore_unknown
        )
        self.report_unknown = (
            options.report_unknown if report_unknown is None else report_unknown
        )
        if hash_inflator is None:
            hash_inflator = options.hash_inflator
        elif not isinstance(hash_inflator, HashInflatorConfig):
            hash_inflator = HashInflatorConfig.from_dict(dict(hash_inflator))
        self.hash_inflator = hash_inflator
        self.flattener = HashFlattener(hash_inflator)

        self.directives: dict[str, DirectiveDescriptor] = {
            **DirectiveRegistry.all(),
            **(directives or {}),
        }
        self.filters: dict[str, FilterFn] = {**FilterRegistry.all(), **(filters or {})}
        self.children: dict[str, Any] = dict(children or {})
        self.stashed: list[str] = []
        self.collector = ErrorCollector()

        self.params: dict[str, Any] = {}
        self.set_params(params or {})

        merger = SpecMerger(self.directives, self._unknown)
        self.fields, self.mixins = merger.resolve(fields or {}, mixins or {})
        self._check_filters()
        self.aliases = AliasResolver(self.fields)

        # unknown declarations reported while resolving; errors start empty
        self.warnings: list[str] = list(self.collector.messages)
        self.reset_fields()

    @property
    def options(self) -> ValidatorOptions:
        """The policy options this instance was built with."""
        return ValidatorOptions(
            ignore_unknown=self.ignore_unknown,
            report_unknown=self.report_unknown,
            hash_inflator=self.hash_inflator,
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, *targets: str | Mapping[str, str]) -> bool:
        """Validate the parameters.

        Targets are field names, optionally prefixed with "+" (required for
        this call) or "-" (optional for this call), or a single mapping of
        incoming parameter name to field name. With no targets the queued
        fields are validated, else every parameter, else every field.

        Returns:
            True if no errors were recorded
        """
        self.reset_fields()
        original = dict(self.params)
        sources: dict[str, str] = {}
        filtered: dict[str, Any] = {}

        try:
            requested = self._rename(targets, sources) + self.stashed
            names: list[str] = []
            toggles: dict[str, Toggle] = {}
            for target in requested:
                name, toggle = Toggle.parse(target)
                names.append(name)
                if toggle is not Toggle.NONE:
                    toggles[name] = toggle

            moved = self.aliases.resolve(self.params)
            sources.update(moved)

            has_params = bool(self.params)
            if names:
                selected = unique(names + list(moved))
            elif has_params:
                selected = list(self.params)
            else:
                selected = list(self.fields)
            logger.debug("Validating fields: %s", ", ".join(selected))

            for name in selected:
                field = self.fields.get(name)
                if field is None:
                    self._unknown(
                        f"Data validation field {name} does not exist", UnknownFieldError
                    )
                    continue
                field.name = name
                field.toggle = toggles.get(name, Toggle.NONE)
                self._validate_field(field, has_params, sources, filtered)
        finally:
            self.params = original
            for key, value in filtered.items():
                if key in self.params:
                    self.params[key] = value

        return self.collector.count() == 0

    def _rename(
        self,
        targets: tuple[str | Mapping[str, str], ...],
        sources: dict[str, str],
    ) -> list[str]:
        """Apply a mapping target and return the requested field names."""
        for target in targets:
            if not isinstance(target, Mapping):
                continue
            requested = []
            for param_name, field_target in target.items():
                name, _ = Toggle.parse(field_target)
                if param_name in self.params:
                    self.params[name] = self.params.pop(param_name)
                    sources[name] = param_name
                requested.append(field_target)
            return requested

        for target in targets:
            if not isinstance(target, str):
                raise TypeError(
                    f"validate() targets must be field names or a mapping, got {target!r}"
                )
        return list(targets)

    def _validate_field(
        self,
        field: FieldSpec,
        has_params: bool,
        sources: dict[str, str],
        filtered: dict[str, Any],
    ) -> None:
        name = field.name
        if name in self.params:
            value = self.params[name]
            if field.filters and isinstance(value, str):
                value = apply_filters(value, field.filters, self.filters)
                self.params[name] = value
                filtered[sources.get(name, name)] = value
            if value == "" and field.default is not None:
                value = field.default
                self.params[name] = value
        else:
            value = field.default
        field.value = value

        required = field.is_required
        if required and is_blank(value):
            self.error(field, f"{field.handle} is required")
            return

        if required or has_value(value):
            for key, argument in field.directives.items():
                descriptor = self.directives.get(key)
                if descriptor is None or descriptor.validator is None:
                    continue
                descriptor.validator(argument, value, field, self)

        if has_params and field.validation is not None:
            recorded = len(field.errors)
            if not field.validation(self, field, self.params) and len(field.errors) == recorded:
                self.error(field, f"{field.handle} did not pass validation")

    def _unknown(self, message: str, error_class: type[Exception] = UnknownFieldError) -> None:
        """Raise, report or skip something undeclared, per instance policy."""
        if not self.ignore_unknown:
            raise error_class(message)
        if self.report_unknown:
            self.collector.add_class(message)
        logger.warning("Ignoring unknown declaration: %s", message)

    def _check_filters(self) -> None:
        for field in self.fields.values():
            for entry in field.filters:
                if not callable(entry) and entry not in self.filters:
                    self._unknown(
                        f"The filter {entry} used by the {field.name} field is not registered",
                        DeclarationError,
                    )

    # -------------------------------------------------------------------------
    # Parameters
    # -------------------------------------------------------------------------

    def param(self, name: str, value: Any = _MISSING) -> Any:
        """Get a parameter, or set it when a value is given.

        A missing name falls back to the value supplied under one of the
        field's aliases.
        """
        if value is not _MISSING:
            self.params[name] = value
            return value
        if name in self.params:
            return self.params[name]
        source = self.aliases.source_key(name, self.params)
        return self.params[source] if source is not None else None

    def get_params(self, *names: str) -> list[Any]:
        return [self.params.get(name) for name in names]

    def set_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Replace the parameters, flattening them if any value is nested."""
        if is_nested(params):
            self.params = self.flattener.flatten(params)
        else:
            self.params = dict(params)
        return self.params

    def get_params_hash(self) -> dict[str, Any]:
        """The parameters rebuilt into their nested form."""
        return self.flattener.unflatten(self.params)

    def set_params_hash(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Replace the parameters with the flattened form of a nested mapping."""
        self.params = self.flattener.flatten(params)
        return self.params

    def queue(self, *names: str) -> Validator:
        """Stash field names to validate on every later validate() call."""
        self.stashed.extend(names)
        return self

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def error(self, field: FieldSpec | str | None = None, message: str | None = None) -> list[str] | None:
        """Read or record errors.

        error() returns every class-level message, error(name) the messages
        of one field, and error(field_spec, message) records a message.
        """
        if message is not None:
            self.collector.add(field, message)
            return None
        if field is None:
            return list(self.collector.messages)
        if isinstance(field, FieldSpec):
            return list(field.errors)
        spec = self.fields.get(field)
        return list(spec.errors) if spec is not None else []

    def error_count(self) -> int:
        return self.collector.count()

    def error_fields(self) -> dict[str, list[str]]:
        return self.collector.by_field(self.fields.values())

    def errors_to_string(self, delimiter: str = ", ") -> str:
        return self.collector.to_string(delimiter)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self) -> Validator:
        """Clear queued field names, errors and field state."""
        self.stashed = []
        return self.reset_fields()

    def reset_errors(self) -> Validator:
        self.collector.clear(self.fields.values())
        return self

    def reset_fields(self) -> Validator:
        """Clear errors plus each field's current value and toggle."""
        self.reset_errors()
        for field in self.fields.values():
            field.reset()
        return self

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def child(self, name: str) -> Validator:
        """Build an independent validator from a registered child profile.

        The child receives a copy of the current parameters and this
        instance's policy options; nothing else is shared.
        """
        if name not in self.children:
            raise UnknownFieldError(f"Validation child {name} does not exist")
        return self.children[name].build(
            params=copy.deepcopy(self.params),
            options=self.options,
        )
