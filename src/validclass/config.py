"""Construction options for validators."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from validclass.types import HashInflatorConfig

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass
class ValidatorOptions:
    """Policy flags and serializer settings shared by a validator and its children.

    Attributes:
        ignore_unknown: Skip undeclared fields and directives instead of raising
        report_unknown: With ignore_unknown, record them as class-level errors
        hash_inflator: Delimiters for flattening nested parameters
    """

    ignore_unknown: bool = False
    report_unknown: bool = False
    hash_inflator: HashInflatorConfig = field(default_factory=HashInflatorConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ValidatorOptions:
        """Create options from snake_case or camelCase keys."""
        data = data or {}
        inflator = data.get("hash_inflator", data.get("hashInflator"))
        if not isinstance(inflator, HashInflatorConfig):
            inflator = HashInflatorConfig.from_dict(inflator)
        return cls(
            ignore_unknown=bool(data.get("ignore_unknown", data.get("ignoreUnknown", False))),
            report_unknown=bool(data.get("report_unknown", data.get("reportUnknown", False))),
            hash_inflator=inflator,
        )

    @classmethod
    def from_env(cls) -> ValidatorOptions:
        """Create options from environment variables.

        Reads VALIDCLASS_IGNORE_UNKNOWN, VALIDCLASS_REPORT_UNKNOWN and the
        VALIDCLASS_HASH_DELIMITER / VALIDCLASS_ARRAY_DELIMITER /
        VALIDCLASS_ESCAPE_SEQUENCE serializer settings; unset values keep
        their defaults.
        """
        inflator: dict[str, str] = {}
        for option, variable in (
            ("hash_delimiter", "VALIDCLASS_HASH_DELIMITER"),
            ("array_delimiter", "VALIDCLASS_ARRAY_DELIMITER"),
            ("escape_sequence", "VALIDCLASS_ESCAPE_SEQUENCE"),
        ):
            if variable in os.environ:
                inflator[option] = os.environ[variable]

        return cls(
            ignore_unknown=_env_flag("VALIDCLASS_IGNORE_UNKNOWN"),
            report_unknown=_env_flag("VALIDCLASS_REPORT_UNKNOWN"),
            hash_inflator=HashInflatorConfig.from_dict(inflator),
        )
