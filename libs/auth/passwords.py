"""bcrypt helpers for account and share passwords."""

import bcrypt

# bcrypt only looks at the first 72 bytes.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return (password or "").encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False
