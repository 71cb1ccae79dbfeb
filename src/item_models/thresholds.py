# src/item_models/thresholds.py
"""
Stable custom_model_data thresholds.

A threshold is a pure function of "<folder>/<id>", so the same model lands
on the same number on every rebuild without any persisted counter.

legacy_string_hash() reproduces, bit for bit, the hash that thresholds in
existing packs were generated with:

    hash = charCode + ((hash << 5) - hash)     # then abs(hash)

Only the shift wraps to signed 32 bits; the subtraction and addition do
not, so the running value can leave the int32 range. Python ints are
unbounded, so the wrap is applied explicitly to the shift only.
Characters are hashed as UTF-16 code units.
"""

from __future__ import annotations

from typing import List


THRESHOLD_START = 32767
THRESHOLD_SPAN = 10_000_000


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_code_units(text: str) -> List[int]:
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def legacy_string_hash(text: str) -> int:
    """Non-negative legacy hash of `text` (see module docstring)."""
    h = 0
    for unit in _utf16_code_units(text):
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return abs(h)


def threshold_for_key(key: str) -> int:
    return THRESHOLD_START + legacy_string_hash(key) % THRESHOLD_SPAN


def threshold_for(folder: str, model_id: str) -> int:
    """Threshold for the model written to `<folder>/<model_id>.json`."""
    return threshold_for_key(f"{folder}/{model_id}")
