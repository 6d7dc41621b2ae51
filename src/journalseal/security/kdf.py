"""Password-based key derivation for JournalSeal."""
import os
from typing import Callable, Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from journalseal.core.exceptions import KeyDerivationError

SALT_LEN = 16
KEY_LEN = 32
PBKDF2_ITERATIONS = 100_000


def generate_salt(length: int = SALT_LEN, randbytes: Callable[[int], bytes] = os.urandom) -> bytes:
    """Return a cryptographically secure random salt."""
    return randbytes(length)


def derive_key(password: bytes | str, salt: bytes) -> bytes:
    """
    Derive a 256-bit key from a password using PBKDF2-HMAC-SHA256.

    The same (password, salt) pair always yields the same key, which is what
    lets the recipient rebuild it from the salt shipped in the container.
    An empty password is accepted; strength policy belongs to the caller.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")

    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LEN,
            salt=salt,
            iterations=PBKDF2_ITERATIONS,
        )
        return kdf.derive(password)
    except (TypeError, ValueError) as exc:
        raise KeyDerivationError(f"Key derivation failed: {exc}") from exc


def kdf_params_to_dict(salt: bytes) -> Dict:
    return {
        "algo": "pbkdf2",
        "hash": "sha256",
        "salt": salt.hex(),
        "iterations": PBKDF2_ITERATIONS,
        "length": KEY_LEN,
    }
