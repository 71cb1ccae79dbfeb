# src/pipeline/definitions.py
"""
Shape checks for `.smodel` definitions.

Definitions arrive as plain JSON objects (from disk or from another
generator's queue). Every field the stages read is checked here first, so a
wrongly typed field surfaces as a DefinitionError naming the field instead
of an AttributeError deep inside a worker.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .errors import DefinitionError


def _type_name(value: Any) -> str:
    return type(value).__name__


def optional_str(details: Mapping[str, Any], key: str) -> Optional[str]:
    """`details[key]` if present and non-empty; it must be a string."""
    value = details.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DefinitionError(f'"{key}" must be a string, got {_type_name(value)}.')
    return value


def str_list(details: Mapping[str, Any], key: str) -> List[str]:
    """`details[key]` as a list of strings ([] when absent)."""
    value = details.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise DefinitionError(f'"{key}" must be a list of non-empty strings.')
    return list(value)


def str_mapping(details: Mapping[str, Any], key: str) -> Dict[str, str]:
    """`details[key]` as a str -> str mapping ({} when absent)."""
    value = details.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise DefinitionError(f'"{key}" must be an object of string values.')
    return dict(value)


def target_types(details: Mapping[str, Any], per_type_models: bool = True) -> List[str]:
    """
    Types a definition targets: `models` keys > `types` > `type`.

    `per_type_models=False` ignores `models` (block definitions have none).
    Returns [] when nothing is named; callers decide whether that is fatal.
    """
    if per_type_models:
        models = details.get("models")
        if models is not None and not isinstance(models, dict):
            raise DefinitionError(f'"models" must be an object keyed by type, got {_type_name(models)}.')
        if models:
            return list(models.keys())

    types = str_list(details, "types")
    if types:
        return types

    single = optional_str(details, "type")
    return [single] if single else []
