# gridrun/op/hash.py
# BLAKE3 hashing helpers for receipts

from __future__ import annotations
from blake3 import blake3
import numpy as np
from .bytes import to_bytes_grid


def hash_bytes(b: bytes) -> str:
    """
    Hash bytes with BLAKE3, return hex digest.

    Args:
        b: bytes to hash

    Returns:
        str: hex digest (64 hex chars = 256 bits)
    """
    return blake3(b).hexdigest()


def hash_grid(G: np.ndarray) -> str:
    """
    Hash a boolean or integer matrix using uint32_le row-major serialization.

    Args:
        G: numpy array (bool or integer dtype)

    Returns:
        str: BLAKE3 hex digest of serialized matrix
    """
    return hash_bytes(to_bytes_grid(G))
