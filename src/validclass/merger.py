"""Resolution of raw declarations into final field specs.

Resolution runs once per validator instance, in this order:
1. Check every directive of every mixin and field against the registry
2. Apply each field's mixins, in the order listed
3. Apply each field's mixin_field sources (mixin-eligible directives only)
4. Merge filter/filters into one de-duplicated filters list

A field's own directive always wins. For multi-valued directives the
contributions are appended instead, keeping the first occurrence of each.
"""

import logging
from typing import Any, Callable, Mapping

from validclass.exceptions import UnknownDirectiveError, UnknownFieldError
from validclass.types import (
    DirectiveDescriptor,
    FieldSpec,
    MixinSpec,
    to_list,
    unique,
)

logger = logging.getLogger(__name__)

# Called for anything undeclared with a message and the exception to raise;
# returns normally when the validator tolerates unknowns
UnknownHandler = Callable[[str, type[Exception]], None]


class SpecMerger:
    """Builds FieldSpec and MixinSpec records from declarations.

    The declarations passed to resolve() are never mutated; every resolved
    field gets a fresh directive mapping.
    """

    def __init__(
        self,
        directives: Mapping[str, DirectiveDescriptor],
        on_unknown: UnknownHandler,
    ):
        self.directives = directives
        self.on_unknown = on_unknown

    def resolve(
        self,
        fields: Mapping[str, Mapping[str, Any]],
        mixins: Mapping[str, Mapping[str, Any]],
    ) -> tuple[dict[str, FieldSpec], dict[str, MixinSpec]]:
        resolved_mixins = {
            name: MixinSpec(name=name, directives=self.check_mixin(name, spec))
            for name, spec in mixins.items()
        }
        resolved = {
            name: self.check_field(name, spec) for name, spec in fields.items()
        }

        for name, spec in resolved.items():
            for mixin_name in to_list(spec.get("mixin")):
                mixin = resolved_mixins.get(mixin_name)
                if mixin is None:
                    self.on_unknown(
                        f"The mixin {mixin_name} used by the {name} field does not exist",
                        UnknownFieldError,
                    )
                    continue
                self._merge(spec, mixin.directives, mixin_only=False)
                logger.debug("Applied mixin %s to field %s", mixin_name, name)

        for name, spec in resolved.items():
            for source in to_list(spec.get("mixin_field")):
                if source not in resolved:
                    self.on_unknown(
                        f"The field {source} used as mixin_field by the {name} field "
                        "does not exist",
                        UnknownFieldError,
                    )
                    continue
                self._copy_field(spec, resolved[source])
                logger.debug("Copied field %s into field %s", source, name)

        for spec in resolved.values():
            filters = to_list(spec.get("filters")) + to_list(spec.pop("filter", None))
            spec["filters"] = unique(filters)

        return (
            {name: FieldSpec(name=name, directives=spec) for name, spec in resolved.items()},
            resolved_mixins,
        )

    def check_mixin(self, name: str, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return the mixin's directives, reporting any it may not use."""
        checked: dict[str, Any] = {}
        for key, value in spec.items():
            descriptor = self.directives.get(key)
            if descriptor is None or not descriptor.mixin:
                self.on_unknown(
                    f"The {key} directive supplied by the {name} mixin is not supported",
                    UnknownDirectiveError,
                )
                continue
            checked[key] = _copy_value(value)
        return checked

    def check_field(self, name: str, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return the field's directives, reporting any it may not use."""
        checked: dict[str, Any] = {}
        for key, value in spec.items():
            descriptor = self.directives.get(key)
            if descriptor is None or not descriptor.field:
                self.on_unknown(
                    f"The {key} directive supplied by the {name} field is not supported",
                    UnknownDirectiveError,
                )
                continue
            checked[key] = _copy_value(value)
        return checked

    def _copy_field(self, target: dict[str, Any], source: Mapping[str, Any]) -> None:
        own = {key: target[key] for key in ("name", "label") if key in target}
        self._merge(target, source, mixin_only=True)
        target.update(own)

    def _merge(
        self,
        target: dict[str, Any],
        source: Mapping[str, Any],
        mixin_only: bool,
    ) -> None:
        for key, value in source.items():
            descriptor = self.directives.get(key)
            if descriptor is None or (mixin_only and not descriptor.mixin):
                continue
            if key not in target:
                target[key] = _copy_value(value)
            elif descriptor.multi:
                target[key] = unique(to_list(target[key]) + to_list(value))


def _copy_value(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    return value
