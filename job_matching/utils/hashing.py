"""Password hashing and verification-code helpers.

Passwords are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>``
so the work factor can be raised later without invalidating existing hashes.
"""

import hashlib
import hmac
import secrets

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 260_000
SALT_BYTES = 16


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Derive a salted PBKDF2-SHA256 hash for a plaintext password.

    Args:
        password: Plaintext password
        iterations: PBKDF2 work factor

    Returns:
        Encoded hash string safe to persist

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")

    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a plaintext password against an encoded hash.

    Returns False for malformed hashes rather than raising.
    """
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        if algorithm != PBKDF2_ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except (AttributeError, ValueError):
        return False

    candidate = hashlib.pbkdf2_hmac("sha256", (password or "").encode("utf-8"), salt, rounds)
    return hmac.compare_digest(candidate, expected)


def generate_verification_code(digits: int = 6) -> str:
    """Random numeric code with no leading zero, e.g. ``'483920'``."""
    lower = 10 ** (digits - 1)
    return str(lower + secrets.randbelow(9 * lower))


def codes_match(expected: str, provided: str) -> bool:
    """Constant-time comparison of two verification codes."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.strip(), str(provided).strip())
