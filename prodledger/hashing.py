# prodledger/hashing.py
"""
Content hashes for products.

A product hash is the 32-byte SHA-3-256 digest of whatever document
identifies the product (label scan, certificate, batch manifest).
"""

import hashlib
from pathlib import Path

from .validation import HASH_LENGTH


def hash_bytes(data: bytes) -> bytes:
    """SHA-3-256 digest of data."""
    return hashlib.sha3_256(data).digest()


def hash_file(path: Path | str) -> bytes:
    """
    Compute the product hash of a file.

    Args:
        path: File to hash

    Returns:
        32-byte digest
    """
    hasher = hashlib.sha3_256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            hasher.update(chunk)
    return hasher.digest()


def parse_hash(hex_str: str) -> bytes:
    """Decode a 64-character hex product hash."""
    try:
        value = bytes.fromhex(hex_str)
    except ValueError:
        raise ValueError(f"Product hash is not hex: {hex_str!r}")
    if len(value) != HASH_LENGTH:
        raise ValueError(f"Product hash must be {HASH_LENGTH} bytes, got {len(value)}")
    return value
