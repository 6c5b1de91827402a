"""validclass: declarative validation of request parameters.

Fields and mixins are declared once; a Validator resolves them into field
specs and checks a parameter set against them:
- Mixins: reusable directive templates applied with the mixin directive
- Filters: string transforms run before validation
- Directives: named constraints (required, min_length, pattern, ...)
- Aliases and toggles: alternate parameter names and per-call required flags

Usage:
    from validclass import ValidationProfile

    profile = ValidationProfile().define_field("login", {"required": 1})
    validator = profile.build(params={"login": ""})

    if not validator.validate():
        print(validator.errors_to_string())
"""

from validclass.aliases import AliasResolver
from validclass.config import ValidatorOptions
from validclass.directives import (
    DirectiveRegistry,
    directive,
    register_builtin_directives,
)
from validclass.errors import ErrorCollector
from validclass.exceptions import (
    AliasCollisionError,
    DeclarationError,
    InvalidErrorTargetError,
    UnknownDirectiveError,
    UnknownFieldError,
    ValidClassError,
)
from validclass.filters import FilterRegistry, register_builtin_filters
from validclass.flatten import HashFlattener, flatten, unflatten
from validclass.loader import load_profile, load_profile_dir, profile_from_dict
from validclass.merger import SpecMerger
from validclass.profile import ValidationProfile
from validclass.types import (
    DirectiveDescriptor,
    FieldSpec,
    HashInflatorConfig,
    MixinSpec,
    Toggle,
)
from validclass.validator import Validator

__all__ = [
    # Types
    "DirectiveDescriptor",
    "FieldSpec",
    "HashInflatorConfig",
    "MixinSpec",
    "Toggle",
    # Exceptions
    "AliasCollisionError",
    "DeclarationError",
    "InvalidErrorTargetError",
    "UnknownDirectiveError",
    "UnknownFieldError",
    "ValidClassError",
    # Registries
    "DirectiveRegistry",
    "FilterRegistry",
    "directive",
    "register_builtin_directives",
    "register_builtin_filters",
    # Engine
    "AliasResolver",
    "ErrorCollector",
    "HashFlattener",
    "SpecMerger",
    "Validator",
    "ValidatorOptions",
    "flatten",
    "unflatten",
    # Declarations
    "ValidationProfile",
    "load_profile",
    "load_profile_dir",
    "profile_from_dict",
]
