"""Password hashing utilities.

Learn: bcrypt salts automatically and produces hashes starting with
"$2b$". The work factor comes from settings (EASYRFQ_BCRYPT_WORK_FACTOR)
so tests can drop it to the minimum of 4. Passwords are truncated to
72 bytes, bcrypt's limit.
"""

import bcrypt


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    Anything that is not a bcrypt hash (e.g. a plaintext seed row)
    simply fails to verify.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
