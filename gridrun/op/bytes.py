# gridrun/op/bytes.py
# Canonical encodings (uint32_le matrices, LEB128 varints) for receipt hashing

from __future__ import annotations
import numpy as np


def to_bytes_grid(G: np.ndarray) -> bytes:
    """
    Encode an H×W matrix as uint32 little-endian row-major bytes.

    Boolean grids are encoded as 0/1. Prefix-sum matrices may hold
    negative values mid-construction, so signed inputs are rejected rather
    than silently wrapped.

    Args:
        G: numpy array of bool or integer dtype

    Returns:
        bytes: uint32_le serialization, prefixed by the framed shape

    Raises:
        TypeError: if G is not bool or integer dtype
        ValueError: if G holds negative values
    """
    if G.dtype.kind not in "biu":
        raise TypeError("Grid must be bool or integer dtype")

    if G.dtype.kind == "i" and G.size and int(G.min()) < 0:
        raise ValueError("Grid must not contain negative values")

    # Row-major order (C-contiguous), explicit little-endian
    g32 = np.ascontiguousarray(G).astype(np.dtype("<u4"))

    return frame_params(*G.shape) + g32.tobytes(order="C")


def varu(n: int) -> bytes:
    """
    Encode unsigned integer as LEB128 varint.

    Args:
        n: unsigned integer (must be >= 0)

    Returns:
        bytes: LEB128 varint

    Raises:
        ValueError: if n < 0
        OverflowError: if n too large for LEB128
    """
    if n < 0:
        raise ValueError("varu expects unsigned (n >= 0)")

    if n >= (1 << 63):
        raise OverflowError(f"Integer {n} too large for safe LEB128 encoding")

    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            break
    return bytes(out)


def frame_params(*ints: int) -> bytes:
    """
    Frame parameter list as <count><p1>...<pk> with LEB128 varints.

    Args:
        *ints: non-negative parameters to encode

    Returns:
        bytes: framed parameter list
    """
    out = bytearray()
    out += varu(len(ints))
    for v in ints:
        out += varu(int(v))
    return bytes(out)


def unvaru(b: bytes) -> tuple[int, bytes]:
    """
    Decode LEB128 varint from bytes.

    Args:
        b: bytes starting with LEB128 varint

    Returns:
        (value, remaining_bytes): decoded value and unconsumed bytes
    """
    result = 0
    shift = 0
    i = 0

    while i < len(b):
        byte = b[i]
        i += 1
        result |= (byte & 0x7F) << shift
        if not (byte & 0x80):
            return result, b[i:]
        shift += 7

    raise ValueError("Incomplete LEB128 varint")


def unframe_params(b: bytes) -> list[int]:
    """
    Unframe parameter list from <count><p1>...<pk>.

    Inverse of frame_params.
    """
    count, remaining = unvaru(b)
    params = []

    for _ in range(count):
        val, remaining = unvaru(remaining)
        params.append(val)

    return params


def encode_probes(probes: list[tuple[int, bool]]) -> bytes:
    """
    Encode a search probe trace as framed (k, result) pairs.

    Each probe contributes two varints: k and 0/1 for the oracle answer.
    """
    flat = []
    for k, ok in probes:
        flat.append(k)
        flat.append(1 if ok else 0)
    return frame_params(*flat)
