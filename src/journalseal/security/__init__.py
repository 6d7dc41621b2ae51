"""Security helpers: key derivation, AEAD and the container format for JournalSeal.

This package provides:
- PBKDF2-HMAC-SHA256 key derivation from a password and random salt
- AES-256-GCM encryption of a whole in-memory document
- the fixed-offset ``salt || nonce || ciphertext || tag`` container
"""

from .kdf import generate_salt, derive_key, kdf_params_to_dict
from .crypto import (
    generate_nonce,
    encrypt,
    decrypt,
    encrypt_document,
    decrypt_document,
)
from .container import pack, unpack

__all__ = [
    "generate_salt",
    "derive_key",
    "kdf_params_to_dict",
    "generate_nonce",
    "encrypt",
    "decrypt",
    "encrypt_document",
    "decrypt_document",
    "pack",
    "unpack",
]
