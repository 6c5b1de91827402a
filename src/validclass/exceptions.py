"""Exceptions raised by validclass.

Declaration problems are programming errors and abort construction.
Unknown fields abort validation unless the instance tolerates them.
Failed validation never raises; it is reported through the error collector.
"""


class ValidClassError(Exception):
    """Base class for all validclass exceptions."""
    pass


class DeclarationError(ValidClassError):
    """A field, mixin, filter or directive declaration is invalid."""
    pass


class UnknownDirectiveError(DeclarationError):
    """A field or mixin uses a directive that is not registered for it."""
    pass


class AliasCollisionError(DeclarationError):
    """An alias collides with a field name or with another field's alias."""
    pass


class InvalidErrorTargetError(DeclarationError, TypeError):
    """error(field, message) was called without a field spec or a message."""
    pass


class UnknownFieldError(ValidClassError):
    """A parameter, target, mixin or child references something undeclared."""
    pass
