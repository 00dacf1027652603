"""Masking of data frame payloads."""

from __future__ import annotations

import secrets
from itertools import cycle
from typing import BinaryIO


def gen_mask() -> bytes:
    """Generate a random four-byte masking key."""
    return secrets.token_bytes(4)


def mask_data(mask: bytes, data: bytes) -> bytes:
    """XOR ``data`` with the repeating four-byte ``mask``; the operation is its own inverse."""
    return bytes(byte ^ key for byte, key in zip(data, cycle(mask)))


class Masker:
    """A writer that masks everything written to it before passing it on."""

    def __init__(self, key: bytes, endpoint: BinaryIO) -> None:
        if len(key) != 4:
            raise ValueError("masking key must be 4 bytes")
        self.key = bytes(key)
        self.endpoint = endpoint
        self._pos = 0

    def write(self, data: bytes) -> int:
        rotated = self.key[self._pos:] + self.key[: self._pos]
        self._pos = (self._pos + len(data)) % len(self.key)
        return self.endpoint.write(mask_data(rotated, data))

    def flush(self) -> None:
        self.endpoint.flush()