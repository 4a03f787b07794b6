# gridrun/io/save.py
# Minimal writers for answers and receipts

from __future__ import annotations
import json
import os
from typing import Any


def format_answer(k: int) -> str:
    """Single-line answer: the integer followed by a newline."""
    return f"{int(k)}\n"


def write_json(path: str, obj: Any) -> None:
    """
    Write object as JSON to file.

    Creates parent directories if needed.
    Uses compact JSON (no whitespace) for determinism.

    Args:
        path: output file path
        obj: JSON-serializable object
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(obj, f, separators=(",", ":"))


def write_jsonl(path: str, records: list[Any]) -> None:
    """
    Write list of objects as JSONL (one JSON object per line).

    Used for receipts output.

    Args:
        path: output file path
        records: list of JSON-serializable objects
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        for record in records:
            f.write(json.dumps(record, separators=(",", ":")) + "\n")
