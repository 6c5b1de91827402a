"""Alias resolution: alternate parameter names for declared fields."""

import logging
from typing import Any, Mapping

from validclass.exceptions import AliasCollisionError
from validclass.types import FieldSpec, unique

logger = logging.getLogger(__name__)


class AliasResolver:
    """Maps alias names onto canonical field names.

    Built once per validator instance. Collisions are declaration errors:
    an alias may not equal any field name or another field's alias.
    """

    def __init__(self, fields: Mapping[str, FieldSpec]):
        self.fields: dict[str, list[str]] = {}
        self.aliases: dict[str, str] = {}

        for name, spec in fields.items():
            aliases = unique(spec.aliases)
            for alias in aliases:
                if alias in self.aliases:
                    raise AliasCollisionError(
                        f"The field {name} contains the alias {alias} which is "
                        f"also defined in the field {self.aliases[alias]}"
                    )
                if alias in fields:
                    raise AliasCollisionError(
                        f"The field {name} contains the alias {alias} which is "
                        "the name of an existing field"
                    )
                self.aliases[alias] = name
            if aliases:
                self.fields[name] = aliases

    def canonical(self, alias: str) -> str | None:
        return self.aliases.get(alias)

    def source_key(self, field_name: str, params: Mapping[str, Any]) -> str | None:
        """The alias supplying a field's value; the last one present wins."""
        found = None
        for alias in self.fields.get(field_name, []):
            if alias in params:
                found = alias
        return found

    def resolve(self, params: dict[str, Any]) -> dict[str, str]:
        """Move aliased values onto their canonical keys, in place.

        Returns:
            Mapping of canonical field name to the alias that supplied it
        """
        moved: dict[str, str] = {}
        for name in self.fields:
            source = self.source_key(name, params)
            if source is None:
                continue
            value = params[source]
            for alias in self.fields[name]:
                params.pop(alias, None)
            params[name] = value
            moved[name] = source
            logger.debug("Resolved alias %s to field %s", source, name)
        return moved
