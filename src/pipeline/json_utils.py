# src/pipeline/json_utils.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def load_json_or_none(
    raw: str,
    *,
    context: str = "unknown",
) -> Tuple[Optional[Any], Optional[str]]:
    """
    Best-effort JSON loader.

    Returns (data, error_message). If parsing fails, data is None and
    error_message describes the failure.
    """
    try:
        data = json.loads(raw)
        return data, None
    except json.JSONDecodeError as e:
        msg = f"{context}: JSONDecodeError at pos {e.pos}: {e.msg}"
        logger.debug("load_json_or_none failed: %s", msg)
        return None, msg


def read_json_mapping(path: Path) -> Dict[str, Any]:
    """
    Read a JSON file that must contain an object at top level.

    Raises OSError if unreadable and ValueError if it is not a JSON object.
    """
    raw = path.read_text(encoding="utf-8")
    data, error = load_json_or_none(raw, context=str(path))
    if error is not None:
        raise ValueError(error)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object at top level, got {type(data).__name__}")
    return data


def read_json_mapping_or_none(path: Path) -> Optional[Dict[str, Any]]:
    """Like read_json_mapping(), but returns None for missing or malformed files."""
    try:
        return read_json_mapping(path)
    except (OSError, ValueError):
        return None


def dump_json(data: Any, indent: int) -> str:
    """Serialize with the pack's on-disk conventions (UTF-8, no ASCII escaping)."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Write `data` to `path`, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_json(data, indent), encoding="utf-8")
