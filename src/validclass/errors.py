"""Error collection for a validator instance.

Messages are kept twice: on the field that produced them and in the
class-level list, both ordered and de-duplicated. A field with a configured
``error`` directive records that message in place of any generated one.
"""

from typing import Iterable

from validclass.exceptions import InvalidErrorTargetError
from validclass.types import FieldSpec


class ErrorCollector:
    """Class-level and field-level validation messages."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def add(self, field: FieldSpec, message: str) -> None:
        """Record a message against a field and the class-level list."""
        if not isinstance(field, FieldSpec) or not isinstance(message, str) or not message:
            raise InvalidErrorTargetError(
                "Can't set error without proper field and error message data, "
                "field must be a FieldSpec and message a non-empty string"
            )
        if field.error:
            message = field.error
        if message not in field.errors:
            field.errors.append(message)
        self.add_class(message)

    def add_class(self, message: str) -> None:
        """Record a message that belongs to no single field."""
        if message not in self.messages:
            self.messages.append(message)

    def clear(self, fields: Iterable[FieldSpec]) -> None:
        self.messages = []
        for field in fields:
            field.errors = []

    def count(self) -> int:
        return len(self.messages)

    def by_field(self, fields: Iterable[FieldSpec]) -> dict[str, list[str]]:
        """Messages keyed by field name, for fields with at least one."""
        return {field.name: list(field.errors) for field in fields if field.errors}

    def to_string(self, delimiter: str = ", ") -> str:
        return delimiter.join(self.messages)
