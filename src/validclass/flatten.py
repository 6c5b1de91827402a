"""Conversion between nested parameters and single-level dotted keys.

    {"user": {"login": "admin", "roles": ["a", "b"]}}

flattens (with the default delimiters) to

    {"user.login": "admin", "user.roles:0": "a", "user.roles:1": "b"}

Mappings descend with the hash delimiter, lists with the array delimiter.
Delimiters and the escape sequence occurring inside keys are escaped, so
unflatten(flatten(x)) == x for any structure of dicts, lists and scalars.
Empty dicts and lists are kept as leaf values.
"""

import re
from typing import Any, Mapping

from validclass.types import HashInflatorConfig

_HASH = "hash"
_ARRAY = "array"


def is_nested(params: Mapping[str, Any]) -> bool:
    """True if any top-level value is itself a mapping or a list."""
    return any(isinstance(value, (Mapping, list)) for value in params.values())


class HashFlattener:
    """Flattens and unflattens parameter structures.

    Example:
        flattener = HashFlattener(HashInflatorConfig(hash_delimiter="/"))
        flat = flattener.flatten({"a": {"b": 1}})   # {"a/b": 1}
        nested = flattener.unflatten(flat)          # {"a": {"b": 1}}
    """

    def __init__(self, config: HashInflatorConfig | None = None):
        self.config = config or HashInflatorConfig()

    # -------------------------------------------------------------------------
    # Flatten
    # -------------------------------------------------------------------------

    def flatten(self, nested: Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(nested, Mapping):
            raise TypeError("Only mappings can be flattened")

        flat: dict[str, Any] = {}
        for key, value in nested.items():
            self._flatten_into(flat, self._escape(str(key)), value)
        return flat

    def _flatten_into(self, flat: dict[str, Any], prefix: str, value: Any) -> None:
        if isinstance(value, Mapping) and value:
            for key, item in value.items():
                path = prefix + self.config.hash_delimiter + self._escape(str(key))
                self._flatten_into(flat, path, item)
        elif isinstance(value, list) and value:
            for index, item in enumerate(value):
                path = f"{prefix}{self.config.array_delimiter}{index}"
                self._flatten_into(flat, path, item)
        else:
            flat[prefix] = value

    def _escape(self, key: str) -> str:
        escape = self.config.escape_sequence
        if not escape:
            return key
        # one left-to-right pass so inserted escapes are never escaped again
        tokens = "|".join(re.escape(token) for token in (escape, *self._delimiters()))
        return re.sub(tokens, lambda match: escape + match.group(0), key)

    # -------------------------------------------------------------------------
    # Unflatten
    # -------------------------------------------------------------------------

    def unflatten(self, flat: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in flat.items():
            self._insert(result, key, self._split(key), value)
        return result

    def _split(self, key: str) -> list[tuple[str, str]]:
        """Split a flat key into (kind, token) segments, honoring escapes."""
        escape = self.config.escape_sequence
        delimiters = self._delimiters()
        segments: list[tuple[str, str]] = []
        kind = _HASH
        token: list[str] = []
        i = 0

        while i < len(key):
            if escape and key.startswith(escape, i):
                i += len(escape)
                for literal in (escape, *delimiters):
                    if key.startswith(literal, i):
                        token.append(literal)
                        i += len(literal)
                        break
                else:
                    token.append(escape)
                continue

            for delimiter in delimiters:
                if key.startswith(delimiter, i):
                    segments.append((kind, "".join(token)))
                    kind = _ARRAY if delimiter == self.config.array_delimiter else _HASH
                    token = []
                    i += len(delimiter)
                    break
            else:
                token.append(key[i])
                i += 1

        segments.append((kind, "".join(token)))
        return segments

    def _insert(
        self,
        root: dict[str, Any],
        key: str,
        segments: list[tuple[str, str]],
        value: Any,
    ) -> None:
        node: Any = root
        for position, (kind, token) in enumerate(segments):
            index = self._index(key, kind, token)
            if position == len(segments) - 1:
                self._assign(node, index, value)
                return

            child = self._lookup(node, index)
            if child is None:
                child = [] if segments[position + 1][0] == _ARRAY else {}
                self._assign(node, index, child)
            elif not isinstance(child, (dict, list)):
                raise ValueError(f"Key '{key}' descends into a scalar value")
            node = child

    @staticmethod
    def _index(key: str, kind: str, token: str) -> str | int:
        if kind == _HASH:
            return token
        if not token.isdigit():
            raise ValueError(f"Invalid array index '{token}' in key '{key}'")
        return int(token)

    @staticmethod
    def _lookup(node: Any, index: str | int) -> Any:
        if isinstance(node, dict):
            return node.get(index)
        if isinstance(index, int) and index < len(node):
            return node[index]
        return None

    @staticmethod
    def _assign(node: Any, index: str | int, value: Any) -> None:
        if isinstance(node, dict):
            if not isinstance(index, str):
                raise ValueError("Array index used on a mapping")
            node[index] = value
            return
        if not isinstance(index, int):
            raise ValueError("Mapping key used on a list")
        if index >= len(node):
            node.extend([None] * (index + 1 - len(node)))
        node[index] = value

    def _delimiters(self) -> list[str]:
        # longest first so a delimiter that prefixes another never shadows it
        return sorted(
            {self.config.hash_delimiter, self.config.array_delimiter},
            key=len,
            reverse=True,
        )


def flatten(nested: Mapping[str, Any], config: HashInflatorConfig | None = None) -> dict[str, Any]:
    """Flatten a nested mapping into delimited keys."""
    return HashFlattener(config).flatten(nested)


def unflatten(flat: Mapping[str, Any], config: HashInflatorConfig | None = None) -> dict[str, Any]:
    """Rebuild the nested structure produced by flatten()."""
    return HashFlattener(config).unflatten(flat)
