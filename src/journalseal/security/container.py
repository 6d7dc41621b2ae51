"""Fixed-offset container that carries an encrypted document.

Layout (no version byte, no length prefix):
- bytes [0, 16):   salt
- bytes [16, 28):  nonce
- bytes [28, end): AES-256-GCM ciphertext followed by its 16-byte tag

Salt and nonce have fixed sizes, so the ciphertext is simply everything after
offset 28 and the transport's own byte length is the only boundary needed.
"""
from typing import Tuple

from journalseal.core.exceptions import ContainerFormatError

SALT_LEN = 16
NONCE_LEN = 12
TAG_LEN = 16
HEADER_LEN = SALT_LEN + NONCE_LEN
MIN_CONTAINER_LEN = HEADER_LEN + TAG_LEN


def pack(salt: bytes, nonce: bytes, ciphertext_and_tag: bytes) -> bytes:
    if len(salt) != SALT_LEN:
        raise ContainerFormatError(f"salt must be {SALT_LEN} bytes, got {len(salt)}")
    if len(nonce) != NONCE_LEN:
        raise ContainerFormatError(f"nonce must be {NONCE_LEN} bytes, got {len(nonce)}")
    return bytes(salt) + bytes(nonce) + bytes(ciphertext_and_tag)


def unpack(container: bytes) -> Tuple[bytes, bytes, bytes]:
    """Split a container into ``(salt, nonce, ciphertext_and_tag)``."""
    if len(container) < MIN_CONTAINER_LEN:
        raise ContainerFormatError(
            f"container too short: {len(container)} bytes, need at least {MIN_CONTAINER_LEN}"
        )
    salt = container[:SALT_LEN]
    nonce = container[SALT_LEN:HEADER_LEN]
    return bytes(salt), bytes(nonce), bytes(container[HEADER_LEN:])
