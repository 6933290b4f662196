"""AES-128 ECB encryption of short strings in 16-byte blocks.

Keys are 16 bytes. A longer key is cut to 16 bytes and a shorter one is
replaced by the built-in default key. The last partial block of a message is
zero-padded, and decryption stops each block at its first zero byte, so text
containing NUL bytes does not survive a round trip.
"""

from __future__ import annotations

import logging
import string

from cryptography.hazmat.primitives.ciphers import Cipher as _AesCipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes

log = logging.getLogger(__name__)

BLOCK_SIZE = 16
KEY_SIZE = 16
DEFAULT_KEY = string.ascii_lowercase[:KEY_SIZE].encode("ascii")

_AES_KEY_SIZES = (16, 24, 32)


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def normalize_key(key: str | bytes) -> bytes:
    """Fit a key to 16 bytes: cut a long one, replace a short one with the default."""
    raw = _as_bytes(key)
    if len(raw) > KEY_SIZE:
        log.debug("cipher key too long, cut to %d bytes", KEY_SIZE)
        return raw[:KEY_SIZE]
    if len(raw) < KEY_SIZE:
        log.debug("cipher key too short, default key used")
        return DEFAULT_KEY
    return raw


class Cipher:
    """Block cipher with a stored key; every method also takes a key of its own."""

    def __init__(self, key: str | bytes | None = None) -> None:
        self._key = DEFAULT_KEY if key is None else normalize_key(key)

    @property
    def key(self) -> bytes:
        return self._key

    @key.setter
    def key(self, value: str | bytes) -> None:
        self._key = normalize_key(value)

    def _resolve(self, key: str | bytes | None) -> bytes:
        if key is None:
            return self._key
        raw = _as_bytes(key)
        if len(raw) not in _AES_KEY_SIZES:
            raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(raw)}")
        return raw

    @staticmethod
    def _check_block(block: bytes) -> None:
        if len(block) != BLOCK_SIZE:
            raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")

    def encrypt_block(self, plaintext: str | bytes, key: str | bytes | None = None) -> bytes:
        """Encrypt exactly one 16-byte block."""
        block = _as_bytes(plaintext)
        self._check_block(block)
        encryptor = _AesCipher(algorithms.AES(self._resolve(key)), modes.ECB()).encryptor()
        return encryptor.update(block) + encryptor.finalize()

    def decrypt_block(self, ciphertext: bytes, key: str | bytes | None = None) -> bytes:
        """Decrypt exactly one 16-byte block."""
        block = bytes(ciphertext)
        self._check_block(block)
        decryptor = _AesCipher(algorithms.AES(self._resolve(key)), modes.ECB()).decryptor()
        return decryptor.update(block) + decryptor.finalize()

    def encrypt_buffer(self, plaintext: str | bytes, key: str | bytes | None = None) -> bytes:
        """Encrypt up to 16 bytes, zero-padded to one block."""
        data = _as_bytes(plaintext)
        if len(data) > BLOCK_SIZE:
            raise ValueError(f"buffer holds at most {BLOCK_SIZE} bytes, got {len(data)}")
        return self.encrypt_block(data.ljust(BLOCK_SIZE, b"\0"), key)

    def decrypt_buffer(self, ciphertext: bytes, key: str | bytes | None = None) -> bytes:
        """Decrypt one block and cut it at its first zero byte."""
        plain = self.decrypt_block(ciphertext, key)
        return plain.split(b"\0", 1)[0]

    def encrypt_string(self, plaintext: str | bytes, key: str | bytes | None = None) -> bytes:
        """Encrypt text of any length block by block."""
        data = _as_bytes(plaintext)
        return b"".join(
            self.encrypt_buffer(data[start:start + BLOCK_SIZE], key)
            for start in range(0, len(data), BLOCK_SIZE)
        )

    def decrypt_string(self, ciphertext: bytes, key: str | bytes | None = None) -> bytes:
        """Decrypt every whole block; a trailing partial block is ignored."""
        data = bytes(ciphertext)
        whole = len(data) - len(data) % BLOCK_SIZE
        return b"".join(
            self.decrypt_buffer(data[start:start + BLOCK_SIZE], key)
            for start in range(0, whole, BLOCK_SIZE)
        )