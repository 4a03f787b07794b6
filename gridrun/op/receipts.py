# gridrun/op/receipts.py
# Receipts kernel and environment fingerprinting

from __future__ import annotations
import platform
import sys
import json
from dataclasses import dataclass, asdict
from importlib import metadata
from typing import Any
from .hash import hash_bytes, hash_grid
from .grid import Grid


@dataclass
class EnvRc:
    """
    Environment fingerprint.

    Two runs are only comparable hash-for-hash when these fields agree.
    """
    platform: str
    endian: str
    py_version: str
    numpy_version: str
    blake3_version: str
    build_flags_hash: str


def _dist_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "unknown"


def env_fingerprint() -> EnvRc:
    """
    Capture environment fingerprint for determinism checking.

    Returns:
        EnvRc: environment receipt
    """
    # Build flags hash: interpreter-level differences
    build_info = {
        "py_version": sys.version,
        "implementation": platform.python_implementation(),
        "version_info": list(sys.version_info),
    }
    flags = hash_bytes(json.dumps(build_info, sort_keys=True).encode())

    return EnvRc(
        platform=platform.system(),
        endian=sys.byteorder,
        py_version=platform.python_version(),
        numpy_version=_dist_version("numpy"),
        blake3_version=_dist_version("blake3"),
        build_flags_hash=flags,
    )


@dataclass
class GridRc:
    """
    Grid receipt: size, passable cell count and content hash.
    """
    n: int
    passable_count: int
    grid_hash: str  # BLAKE3(uint32_le row-major 0/1 cells)


def grid_receipt(grid: Grid) -> GridRc:
    return GridRc(
        n=grid.n,
        passable_count=grid.passable_count(),
        grid_hash=hash_grid(grid.cells),
    )


@dataclass
class RunRc:
    """
    Root receipt container for a single solve.

    sections: per-stage receipts (plain dicts)
    hashes:   BLAKE3 of each section's canonical JSON
    table_hash: BLAKE3 over sorted "section:hash" lines
    final:    {"mode": "line"|"pair", "n": int, "k": int}
    """
    env: EnvRc
    sections: dict[str, Any]
    hashes: dict[str, str]
    table_hash: str
    final: dict[str, Any]


def aggregate(run: Any) -> Any:
    """
    Convert nested receipts (dataclasses or dicts) to JSON-serializable data.

    Args:
        run: RunRc, any receipt dataclass, or dict containing receipts

    Returns:
        plain dict/list/scalar representation
    """
    def to_plain(x: Any) -> Any:
        """Recursively convert dataclasses to dicts."""
        if hasattr(x, "__dataclass_fields__"):
            return {k: to_plain(v) for k, v in asdict(x).items()}
        if isinstance(x, dict):
            return {k: to_plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [to_plain(v) for v in x]
        return x

    return to_plain(run)


def section_hash(section: Any) -> str:
    """BLAKE3 of a receipt's canonical (sorted, compact) JSON."""
    canonical = json.dumps(aggregate(section), sort_keys=True, separators=(",", ":"))
    return hash_bytes(canonical.encode("utf-8"))


def table_hash(hashes: dict[str, str]) -> str:
    """BLAKE3 over "key:hash" lines in sorted key order."""
    lines = "\n".join(f"{k}:{hashes[k]}" for k in sorted(hashes))
    return hash_bytes(lines.encode("utf-8"))
