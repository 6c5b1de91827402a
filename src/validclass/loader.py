"""Load validation profiles from YAML files.

A profile file holds two optional top-level mappings:

    mixins:
      basic:
        required: 1
        max_length: 255
    fields:
      login:
        mixin: basic
        min_length: 3
        filters: [trim, lowercase]

Filters and directives named in YAML must already be registered; callbacks
(the validation directive, inline filters) can only be added in code.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from validclass.exceptions import DeclarationError
from validclass.profile import ValidationProfile

logger = logging.getLogger(__name__)

_SECTIONS = ("fields", "mixins")


def profile_from_dict(data: Any, source: str = "<profile>") -> ValidationProfile:
    """Create a profile from an already-parsed document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DeclarationError(f"{source}: a profile must be a mapping")

    unknown = sorted(str(key) for key in data if key not in _SECTIONS)
    if unknown:
        raise DeclarationError(
            f"{source}: unsupported top-level key(s): {', '.join(unknown)}"
        )

    profile = ValidationProfile(name=Path(source).stem)
    for section in _SECTIONS:
        entries = data.get(section) or {}
        if not isinstance(entries, dict):
            raise DeclarationError(f"{source}: '{section}' must be a mapping")
        for name, spec in entries.items():
            if spec is None:
                spec = {}
            if section == "fields":
                profile.define_field(str(name), spec)
            else:
                profile.define_mixin(str(name), spec)
    return profile


def load_profile(path: Path | str) -> ValidationProfile:
    """Load a profile from a YAML file, or from every YAML file in a directory."""
    path = Path(path)
    if path.is_dir():
        return load_profile_dir(path)

    with open(path) as f:
        data = yaml.safe_load(f)
    logger.debug("Loaded profile %s", path)
    return profile_from_dict(data, source=str(path))


def load_profile_dir(path: Path | str) -> ValidationProfile:
    """Merge every *.yaml / *.yml file of a directory, in file name order.

    Raises:
        DeclarationError: If two files declare the same field or mixin
    """
    path = Path(path)
    merged = ValidationProfile(name=path.name)
    files = sorted([*path.glob("*.yaml"), *path.glob("*.yml")])
    for yaml_file in files:
        profile = load_profile(yaml_file)
        try:
            merged.update(profile)
        except DeclarationError as e:
            raise DeclarationError(f"{yaml_file}: {e}") from e
    return merged
