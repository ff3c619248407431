"""User domain exceptions.

Store-origin failures for lookups, uniqueness conflicts and name
validation. Each carries the failing arguments in ``details``.
"""

from typing import Any

from idstore.core.exceptions import ConflictError, NotFoundError, ValidationError


class UserNotExistError(NotFoundError):
    """Raised when a user cannot be found by id, name or email."""

    error_type = "user_not_exist"

    def __init__(self, **details: Any):
        super().__init__(f"user does not exist: {details}", details)


class EmailAddressNotExistError(NotFoundError):
    """Raised when a secondary email address cannot be found."""

    error_type = "email_address_not_exist"

    def __init__(self, **details: Any):
        super().__init__(f"email address does not exist: {details}", details)


class UserAlreadyExistError(ConflictError):
    """Raised when the requested username is taken (case-insensitive)."""

    error_type = "user_already_exist"

    def __init__(self, **details: Any):
        super().__init__(f"user already exists: {details}", details)


class EmailAlreadyUsedError(ConflictError):
    """Raised when an email is already used by an eligible account."""

    error_type = "email_already_used"

    def __init__(self, **details: Any):
        super().__init__(f"email has been used: {details}", details)


class NameNotAllowedError(ValidationError):
    """Raised when a name is empty, reserved or matches a reserved pattern."""

    error_type = "name_not_allowed"

    def __init__(self, **details: Any):
        super().__init__(f"name is not allowed: {details}", details)
