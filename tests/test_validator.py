"""Tests for Validator: target selection, toggles, aliases, errors and params."""

import pytest

from validclass.config import ValidatorOptions
from validclass.directives import DirectiveRegistry, register_builtin_directives
from validclass.exceptions import (
    AliasCollisionError,
    DeclarationError,
    InvalidErrorTargetError,
    UnknownDirectiveError,
    UnknownFieldError,
)
from validclass.filters import FilterRegistry, register_builtin_filters
from validclass.profile import ValidationProfile
from validclass.types import DirectiveDescriptor
from validclass.validator import Validator


@pytest.fixture(autouse=True)
def setup_registries():
    DirectiveRegistry.clear()
    FilterRegistry.clear()
    register_builtin_directives()
    register_builtin_filters()
    yield
    DirectiveRegistry.clear()
    FilterRegistry.clear()


def make_signup(**params) -> Validator:
    return Validator(
        params=params,
        fields={
            "login": {"mixin": "basic", "min_length": 5, "label": "User Login"},
            "password": {"mixin": "basic", "min_length": 5, "matches": "password2"},
            "password2": {"label": "Password Confirmation"},
        },
        mixins={"basic": {"required": 1, "max_length": 255, "filters": ["trim"]}},
    )


# =============================================================================
# Basic Runs
# =============================================================================


class TestValidate:
    def test_matching_passwords(self):
        validator = make_signup(login="admin", password="secret", password2="secret")
        assert validator.validate("login", "password")
        assert validator.error_count() == 0

    def test_mismatched_passwords(self):
        validator = Validator(
            params={"password": "secret", "password2": "s3cret"},
            fields={"password": {"matches": "password2"}, "password2": {}},
        )
        assert not validator.validate("password")
        assert validator.error() == ["password does not match password2"]

    def test_labels_used_on_both_sides(self):
        validator = make_signup(login="admin", password="secret", password2="other")
        assert not validator.validate("password")
        assert validator.error("password") == [
            "password does not match Password Confirmation"
        ]

    def test_telephone_pattern(self):
        fields = {"telephone": {"pattern": "### ###-####"}}
        assert Validator(params={"telephone": "123 456-7890"}, fields=fields).validate()
        validator = Validator(params={"telephone": "1234567890"}, fields=fields)
        assert not validator.validate()
        assert validator.error() == ["telephone does not match the pattern ### ###-####"]

    def test_required_short_circuits_other_directives(self):
        validator = make_signup(login="", password="secret", password2="secret")
        assert not validator.validate("login")
        assert validator.error("login") == ["User Login is required"]

    def test_optional_blank_value_skips_directives(self):
        validator = Validator(params={"nick": ""}, fields={"nick": {"min_length": 3}})
        assert validator.validate()

    def test_directives_run_in_declaration_order(self):
        validator = Validator(
            params={"code": "ab"},
            fields={"code": {"min_length": 3, "pattern": "###"}},
        )
        assert not validator.validate()
        assert validator.error() == [
            "code must contain 3 or more characters",
            "code does not match the pattern ###",
        ]

    def test_errors_reset_between_runs(self):
        validator = Validator(params={"login": ""}, fields={"login": {"required": 1}})
        assert not validator.validate()
        validator.param("login", "admin")
        assert validator.validate()
        assert validator.error() == []

    def test_invalid_target_type(self):
        validator = Validator(fields={"login": {}})
        with pytest.raises(TypeError):
            validator.validate(5)

    def test_field_name_matches_registry_key(self):
        validator = make_signup(login="admin", password="secret", password2="secret")
        validator.validate("login")
        for name, field in validator.fields.items():
            assert field.name == name


# =============================================================================
# Target Selection
# =============================================================================


class TestTargets:
    def make(self, **params) -> Validator:
        return Validator(
            params=params,
            fields={"login": {"required": 1}, "password": {"required": 1}, "email": {"required": 1}},
        )

    def test_no_targets_and_no_params_validates_every_field(self):
        validator = self.make()
        assert not validator.validate()
        assert validator.error_count() == 3

    def test_no_targets_validates_every_param(self):
        validator = self.make(login="admin")
        assert validator.validate()

    def test_queued_fields_are_validated(self):
        validator = self.make().queue("login", "password")
        assert not validator.validate()
        assert validator.error() == ["login is required", "password is required"]

    def test_queued_fields_are_added_to_explicit_targets(self):
        validator = self.make().queue("login")
        assert not validator.validate("email")
        assert validator.error() == ["email is required", "login is required"]

    def test_queue_returns_validator(self):
        validator = self.make()
        assert validator.queue("login") is validator

    def test_reset_clears_queue(self):
        validator = Validator(fields={"login": {"required": 1}, "nick": {}})
        validator.queue("nick").reset()
        assert not validator.validate()
        assert validator.error() == ["login is required"]


# =============================================================================
# Toggles
# =============================================================================


class TestToggles:
    def test_plus_makes_field_required_for_one_call(self):
        validator = Validator(fields={"nick": {}})
        assert not validator.validate("+nick")
        assert validator.error() == ["nick is required"]
        assert validator.validate()
        assert validator.validate("nick")

    def test_minus_makes_field_optional(self):
        validator = Validator(fields={"login": {"required": 1}})
        assert validator.validate("-login")
        assert not validator.validate("login")

    def test_toggle_in_mapping_target(self):
        validator = Validator(fields={"login": {}})
        assert not validator.validate({"user": "+login"})
        assert validator.error() == ["login is required"]


# =============================================================================
# Aliases
# =============================================================================


class TestAliases:
    def make(self, **params) -> Validator:
        return Validator(
            params=params,
            fields={"pager": {"alias": ["page_user_list"], "min_length": 1}},
        )

    def test_alias_target_validates(self):
        validator = self.make(page_user_list=3)
        assert validator.validate("pager")
        assert validator.param("pager") == 3

    def test_params_are_restored(self):
        validator = self.make(page_user_list=3)
        validator.validate("pager")
        assert validator.params == {"page_user_list": 3}

    def test_bare_validate_resolves_alias(self):
        validator = Validator(
            params={"page_user_list": ""},
            fields={"pager": {"alias": ["page_user_list"], "required": 1}},
        )
        assert not validator.validate()
        assert validator.error() == ["pager is required"]

    def test_alias_collision_is_fatal_even_when_ignoring_unknowns(self):
        with pytest.raises(AliasCollisionError):
            Validator(
                fields={"a": {"alias": "x"}, "b": {"alias": "x"}},
                ignore_unknown=True,
            )

    def test_filtered_value_written_back_to_alias(self):
        validator = Validator(
            params={"pg": " 3a "},
            fields={"pager": {"alias": "pg", "filters": ["numeric"]}},
        )
        assert validator.validate()
        assert validator.params == {"pg": "3"}


# =============================================================================
# Mapping Targets
# =============================================================================


class TestMappingTargets:
    def test_renames_for_the_run_only(self):
        validator = Validator(
            params={"user": "ab"},
            fields={"login": {"required": 1, "min_length": 3}},
        )
        assert not validator.validate({"user": "login"})
        assert validator.error() == ["login must contain 3 or more characters"]
        assert validator.params == {"user": "ab"}

    def test_missing_source_validates_field_as_absent(self):
        validator = Validator(params={"other": "x"}, fields={"login": {"required": 1}})
        assert not validator.validate({"user": "login"})
        assert validator.error() == ["login is required"]


# =============================================================================
# Filters and Defaults
# =============================================================================


class TestFiltersAndDefaults:
    def test_filtered_values_remain_after_validate(self):
        validator = Validator(
            params={"name": "  ann "},
            fields={"name": {"filters": ["trim", "uppercase"]}},
        )
        assert validator.validate()
        assert validator.param("name") == "ANN"

    def test_filters_run_on_empty_string(self):
        validator = Validator(
            params={"note": ""},
            fields={"note": {"filters": [lambda value: value or "n/a"]}},
        )
        validator.validate()
        assert validator.param("note") == "n/a"

    def test_instance_filters(self):
        validator = Validator(
            params={"phone": "555-1234"},
            fields={"phone": {"filters": ["no_dashes"], "length": 7}},
            filters={"no_dashes": lambda value: value.replace("-", "")},
        )
        assert validator.validate()
        assert validator.param("phone") == "5551234"

    def test_unknown_filter_name(self):
        with pytest.raises(DeclarationError, match="nope"):
            Validator(fields={"x": {"filters": ["nope"]}})

    def test_default_used_for_empty_value(self):
        validator = Validator(
            params={"status": ""},
            fields={"status": {"default": "active", "options": "active, inactive"}},
        )
        assert validator.validate()
        assert validator.fields["status"].value == "active"

    def test_default_used_for_missing_value(self):
        validator = Validator(
            params={"other": 1},
            fields={"status": {"value": "active", "required": 1}, "other": {}},
        )
        assert validator.validate("status")


# =============================================================================
# Custom Validation
# =============================================================================


class TestValidationCallback:
    def test_false_records_generic_message(self):
        validator = Validator(
            params={"login": "admin"},
            fields={"login": {"validation": lambda v, field, params: False}},
        )
        assert not validator.validate()
        assert validator.error() == ["login did not pass validation"]

    def test_callback_errors_replace_generic_message(self):
        def check_login(validator, field, params):
            if field.value == "root":
                validator.error(field, "root is reserved")
                return False
            return True

        validator = Validator(params={"login": "root"}, fields={"login": {"validation": check_login}})
        assert not validator.validate()
        assert validator.error() == ["root is reserved"]

    def test_callback_receives_params(self):
        seen = []
        validator = Validator(
            params={"a": "1", "b": "2"},
            fields={"a": {"validation": lambda v, field, params: seen.append(dict(params)) or True}, "b": {}},
        )
        validator.validate("a")
        assert seen == [{"a": "1", "b": "2"}]

    def test_callback_skipped_without_params(self):
        calls = []
        validator = Validator(
            fields={"login": {"validation": lambda v, field, params: calls.append(field)}}
        )
        assert validator.validate("login")
        assert calls == []


# =============================================================================
# Unknown Declarations
# =============================================================================


class TestUnknown:
    def test_unknown_param_raises(self):
        validator = Validator(params={"nope": 1}, fields={"login": {}})
        with pytest.raises(UnknownFieldError, match="Data validation field nope does not exist"):
            validator.validate()

    def test_unknown_target_raises(self):
        with pytest.raises(UnknownFieldError):
            Validator(fields={"login": {}}).validate("nope")

    def test_ignored(self):
        validator = Validator(params={"nope": 1}, fields={"login": {}}, ignore_unknown=True)
        assert validator.validate()

    def test_reported(self):
        validator = Validator(
            params={"nope": 1},
            fields={"login": {}},
            ignore_unknown=True,
            report_unknown=True,
        )
        assert not validator.validate()
        assert validator.error() == ["Data validation field nope does not exist"]

    def test_unknown_directive_raises_at_construction(self):
        with pytest.raises(UnknownDirectiveError):
            Validator(fields={"login": {"bogus": 1}})

    def test_unknown_directive_dropped_when_ignoring(self):
        validator = Validator(fields={"login": {"bogus": 1}}, ignore_unknown=True)
        assert "bogus" not in validator.fields["login"].directives

    def test_reported_declarations_are_kept_apart_from_errors(self):
        validator = Validator(
            fields={"login": {"bogus": 1}},
            ignore_unknown=True,
            report_unknown=True,
        )
        assert validator.warnings == [
            "The bogus directive supplied by the login field is not supported"
        ]
        assert validator.error() == []
        assert validator.error_count() == 0
        assert validator.validate()
        assert validator.warnings == [
            "The bogus directive supplied by the login field is not supported"
        ]

    def test_explicit_keyword_wins_over_options(self):
        validator = Validator(options=ValidatorOptions(ignore_unknown=True), ignore_unknown=False)
        assert not validator.ignore_unknown

    def test_instance_directive(self):
        def check_even(argument, value, field, validator):
            if int(value) % 2:
                validator.error(field, f"{field.handle} must be even")

        validator = Validator(
            params={"count": "3"},
            fields={"count": {"even": 1}},
            directives={"even": DirectiveDescriptor("even", validator=check_even)},
        )
        assert not validator.validate()
        assert validator.error() == ["count must be even"]
        assert not DirectiveRegistry.is_registered("even")


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    def test_errors_to_string(self):
        validator = Validator(fields={"a": {"required": 1}, "b": {"required": 1}})
        validator.validate()
        assert validator.errors_to_string() == "a is required, b is required"
        assert validator.errors_to_string("\n") == "a is required\nb is required"

    def test_shared_override_is_reported_once(self):
        validator = Validator(
            fields={"a": {"required": 1, "error": "Missing"}, "b": {"required": 1, "error": "Missing"}}
        )
        validator.validate()
        assert validator.errors_to_string() == "Missing"
        assert validator.error("a") == ["Missing"]
        assert validator.error("b") == ["Missing"]

    def test_error_override(self):
        validator = Validator(
            params={"login": "ab"},
            fields={"login": {"required": 1, "min_length": 5, "pattern": "###", "error": "Login invalid."}},
        )
        assert not validator.validate()
        assert validator.error() == ["Login invalid."]

    def test_error_fields(self):
        validator = make_signup(login="x", password="secret", password2="secret")
        validator.validate("login", "password")
        assert validator.error_fields() == {
            "login": ["User Login must contain 5 or more characters"]
        }

    def test_error_for_unknown_name_is_empty(self):
        assert Validator(fields={"login": {}}).error("nope") == []

    def test_recording_by_name_is_rejected(self):
        validator = Validator(fields={"login": {}})
        with pytest.raises(InvalidErrorTargetError):
            validator.error("login", "custom")

    def test_recording_on_field_spec(self):
        validator = Validator(fields={"login": {}})
        validator.error(validator.fields["login"], "custom")
        assert validator.error("login") == ["custom"]
        assert validator.error_count() == 1
        validator.reset_errors()
        assert validator.error_count() == 0


# =============================================================================
# Parameters
# =============================================================================


class TestParams:
    def test_nested_params_are_flattened(self):
        validator = Validator(
            params={"user": {"login": "ad"}},
            fields={"user.login": {"min_length": 3}},
        )
        assert validator.params == {"user.login": "ad"}
        assert not validator.validate()
        assert validator.error() == ["user.login must contain 3 or more characters"]

    def test_params_hash(self):
        validator = Validator(fields={"a.b": {}})
        validator.set_params_hash({"a": {"b": 1}, "tags": ["x"]})
        assert validator.params == {"a.b": 1, "tags:0": "x"}
        assert validator.get_params_hash() == {"a": {"b": 1}, "tags": ["x"]}

    def test_custom_delimiters(self):
        validator = Validator(
            params={"user": {"login": "admin"}},
            fields={"user/login": {}},
            hash_inflator={"hashDelimiter": "/"},
        )
        assert validator.params == {"user/login": "admin"}

    def test_get_and_set(self):
        validator = Validator(params={"a": 1})
        assert validator.param("b", 2) == 2
        assert validator.get_params("a", "b", "c") == [1, 2, None]


# =============================================================================
# Children
# =============================================================================


class TestChildren:
    def make(self, **options) -> Validator:
        address = ValidationProfile("address").define_field("zip", {"required": 1, "length": 5})
        signup = (
            ValidationProfile("signup")
            .define_field("name", {"required": 1})
            .define_child("address", address)
        )
        return signup.build(params={"name": "ann", "zip": "123"}, **options)

    def test_child_is_independent(self):
        validator = self.make()
        child = validator.child("address")
        assert not child.validate("zip")
        assert child.error() == ["zip must contain exactly 5 characters"]
        assert validator.error_count() == 0
        child.param("zip", "12345")
        assert validator.param("zip") == "123"

    def test_child_inherits_policy(self):
        child = self.make(ignore_unknown=True).child("address")
        assert child.ignore_unknown
        assert child.validate("name")

    def test_unknown_child(self):
        with pytest.raises(UnknownFieldError, match="Validation child billing does not exist"):
            self.make().child("billing")
