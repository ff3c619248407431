"""Name normalization and reserved-name validation."""

from fnmatch import fnmatchcase

from idstore.user.exceptions import NameNotAllowedError

# Names that collide with routes and well-known paths of hosting frontends.
RESERVED_USERNAMES: frozenset[str] = frozenset(
    {
        "-",
        ".",
        "..",
        "admin",
        "api",
        "assets",
        "avatar",
        "commits",
        "create",
        "css",
        "debug",
        "explore",
        "help",
        "img",
        "install",
        "issues",
        "js",
        "less",
        "new",
        "org",
        "plugins",
        "pulls",
        "raw",
        "repo",
        "stars",
        "template",
        "user",
    }
)

RESERVED_USERNAME_PATTERNS: tuple[str, ...] = ("*.keys", "*.gpg")


def normalize_name(name: str) -> str:
    """Return the case-insensitive comparison key for a name."""
    return name.strip().lower()


def normalize_email(email: str) -> str:
    """Return the case-insensitive comparison key for an email address."""
    return email.strip().lower()


def ensure_name_allowed(
    name: str,
    reserved: frozenset[str] = RESERVED_USERNAMES,
    patterns: tuple[str, ...] = RESERVED_USERNAME_PATTERNS,
) -> None:
    """Validate a name against reserved words and patterns.

    Raises:
        NameNotAllowedError: With ``reason`` set to ``empty``, ``reserved``
            or ``reserved_pattern``.
    """
    key = normalize_name(name)
    if not key:
        raise NameNotAllowedError(reason="empty", name=name)

    if key in reserved:
        raise NameNotAllowedError(reason="reserved", name=name)

    for pattern in patterns:
        if fnmatchcase(key, pattern):
            raise NameNotAllowedError(
                reason="reserved_pattern", pattern=pattern, name=name
            )
