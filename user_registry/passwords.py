from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of its input. Recent releases of the
# library refuse longer input instead of ignoring the tail, so both hashing and
# verification cut the UTF-8 encoding to this length themselves.
MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, *, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash ``password`` with bcrypt using a freshly generated salt.

    The result is the usual ``$2b$<cost>$<salt+digest>`` text, so the cost and
    salt travel with the hash and ``verify_password`` needs nothing else.
    Only the first 72 UTF-8 bytes of the password take part in the hash.
    """
    if password is None:
        raise ValueError("Password is required")
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash (bad salt/prefix).
        return False
