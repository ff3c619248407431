"""Auth domain exceptions.

Credential failures, login source consistency failures and login source
configuration failures.
"""

from typing import Any

from idstore.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    NotFoundError,
)


class BadCredentialsError(AuthenticationError):
    """Raised when credentials do not verify.

    Carries ``login`` always and ``userID`` only once the account is
    known to exist, so unknown identifiers are indistinguishable from
    wrong secrets.
    """

    error_type = "bad_credentials"

    def __init__(self, **details: Any):
        super().__init__(f"invalid credentials: {details}", details)


class LoginSourceMismatchError(AuthorizationError):
    """Raised when a user signs in through a source other than their own."""

    error_type = "login_source_mismatch"

    def __init__(self, **details: Any):
        super().__init__(f"login source mismatch: {details}", details)


class LoginSourceNotExistError(NotFoundError):
    """Raised when no login source is configured under the given id."""

    error_type = "login_source_not_exist"

    def __init__(self, **details: Any):
        super().__init__(f"login source does not exist: {details}", details)


class LoginSourceNotActivatedError(ConfigurationError):
    """Raised when an inactive login source is asked to verify credentials."""

    error_type = "login_source_not_activated"

    def __init__(self, **details: Any):
        super().__init__(f"login source is not activated: {details}", details)
