from typing import NotRequired, TypedDict

# Constants
IDENTITY_TOOLKIT_BASE_URL = "https://identitytoolkit.googleapis.com"

IDENTITY_TOOLKIT_ENDPOINTS: dict[str, str] = {
    "signInWithPassword": "v1/accounts:signInWithPassword",
}

# Error messages that mean the submitted credentials were rejected.
INVALID_CREDENTIALS_MESSAGES = frozenset(
    {
        "EMAIL_NOT_FOUND",
        "INVALID_PASSWORD",
        "INVALID_LOGIN_CREDENTIALS",
        "INVALID_EMAIL",
        "MISSING_PASSWORD",
        "USER_DISABLED",
    }
)


# Request schemas
class SignInWithPasswordRequest(TypedDict):
    """Request schema for signInWithPassword endpoint.

    https://cloud.google.com/identity-platform/docs/reference/rest/v1/accounts/signInWithPassword
    """

    email: str
    password: str
    returnSecureToken: bool
    tenantId: NotRequired[str]


# Response schemas
class SignInWithPasswordResponse(TypedDict, total=False):
    """Response schema for signInWithPassword endpoint."""

    kind: str
    localId: str  # The UID of the authenticated user
    email: str
    displayName: str
    idToken: str
    registered: bool
    refreshToken: str
    expiresIn: str


class ErrorResponse(TypedDict, total=False):
    """Error envelope returned by Identity Toolkit."""

    error: dict[str, object]
