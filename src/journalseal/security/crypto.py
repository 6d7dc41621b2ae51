"""AES-256-GCM document encryption and the salt/nonce/ciphertext pipeline.

A document is protected in one pass:

1. draw a fresh 16-byte salt and 12-byte nonce
2. derive a 256-bit key from the password and salt (:mod:`journalseal.security.kdf`)
3. encrypt with AES-256-GCM, no associated data
4. pack ``salt || nonce || ciphertext || tag`` (:mod:`journalseal.security.container`)

The key exists only for the duration of one call. Decryption helpers are kept
here so the recipient side and tests can read the same format back.
"""
import os
from typing import Callable, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from journalseal.core.exceptions import DecryptionError, EncryptionError
from .container import NONCE_LEN, TAG_LEN, pack, unpack
from .kdf import KEY_LEN, derive_key, generate_salt


def generate_nonce(randbytes: Callable[[int], bytes] = os.urandom) -> bytes:
    return randbytes(NONCE_LEN)


def _check_lengths(key: bytes, nonce: bytes) -> None:
    if len(key) != KEY_LEN:
        raise EncryptionError(f"key must be {KEY_LEN} bytes, got {len(key)}")
    if len(nonce) != NONCE_LEN:
        raise EncryptionError(f"nonce must be {NONCE_LEN} bytes, got {len(nonce)}")


def encrypt(plaintext: bytes, key: bytes, nonce: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypt ``plaintext`` with AES-256-GCM and return ``(ciphertext, tag)``.

    The input buffer is not modified. Raises :class:`EncryptionError` when the
    key or nonce has the wrong length or the cipher rejects the input.
    """
    _check_lengths(key, nonce)
    try:
        ct_full = AESGCM(bytes(key)).encrypt(bytes(nonce), bytes(plaintext), None)
    except (TypeError, ValueError, OverflowError) as exc:
        raise EncryptionError(f"Encryption failed: {exc}") from exc
    return ct_full[:-TAG_LEN], ct_full[-TAG_LEN:]


def decrypt(ciphertext: bytes, tag: bytes, key: bytes, nonce: bytes) -> bytes:
    """Verify ``tag`` and return the plaintext; raise :class:`DecryptionError` on mismatch."""
    _check_lengths(key, nonce)
    try:
        return AESGCM(bytes(key)).decrypt(bytes(nonce), bytes(ciphertext) + bytes(tag), None)
    except InvalidTag as exc:
        raise DecryptionError("Authentication failed: wrong password or tampered container") from exc


def encrypt_document(
    plaintext: bytes,
    password: bytes | str,
    randbytes: Callable[[int], bytes] = os.urandom,
) -> bytes:
    """
    Run the full pipeline and return the packed container.

    ``randbytes`` must stay ``os.urandom`` outside of tests; a fixed source is
    only there to make ciphertext assertions reproducible.
    """
    salt = generate_salt(randbytes=randbytes)
    nonce = generate_nonce(randbytes=randbytes)
    key = derive_key(password, salt)
    ciphertext, tag = encrypt(plaintext, key, nonce)
    return pack(salt, nonce, ciphertext + tag)


def decrypt_document(container: bytes, password: bytes | str) -> bytes:
    salt, nonce, ct_and_tag = unpack(container)
    key = derive_key(password, salt)
    return decrypt(ct_and_tag[:-TAG_LEN], ct_and_tag[-TAG_LEN:], key, nonce)
