"""Local credential hashing and verification.

Passwords are stored as bcrypt hashes. The hash records its own salt and
cost, so changing the configured rounds only affects new hashes. The
salt is also kept on the user row. An empty password stores no local
secret at all; such accounts (typically provisioned from an external
login source) never verify locally.
"""

import bcrypt

from idstore.core.exceptions import ValidationError

DEFAULT_ROUNDS = 12
# bcrypt only reads the first 72 bytes of a secret.
MAX_PASSWORD_BYTES = 72


def generate_salt(rounds: int = DEFAULT_ROUNDS) -> str:
    return bcrypt.gensalt(rounds=rounds).decode("ascii")


def hash_password(password: str, salt: str) -> str:
    """Return the stored form of ``password`` for a bcrypt ``salt``.

    Returns an empty string for an empty password.

    Raises:
        ValidationError: If bcrypt cannot hash the password (too long or
            containing NUL)
    """
    if not password:
        return ""
    secret = password.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            "Password is too long", {"max_bytes": MAX_PASSWORD_BYTES}
        )
    if b"\x00" in secret:
        raise ValidationError("Password must not contain NUL characters")
    return bcrypt.hashpw(secret, salt.encode("ascii")).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash using the hash's own cost."""
    if not password_hash or not password:
        return False
    secret = password.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(secret, password_hash.encode("ascii"))
    except ValueError:
        # Not a bcrypt hash.
        return False
