# src/item_models/substitution.py

from __future__ import annotations

import copy
from typing import Any, Mapping


def substitute_placeholders(template: Any, replacements: Mapping[str, Any]) -> Any:
    """
    Return a copy of `template` with placeholder leaves replaced.

    Only string values that are exactly a placeholder token are replaced;
    mapping keys and strings that merely contain a token are left alone.
    A replacement may be a string or a sub-tree (e.g. "$fallback" splices in
    the fallback model object); sub-trees are deep-copied per use.
    """
    if isinstance(template, dict):
        return {key: substitute_placeholders(value, replacements) for key, value in template.items()}
    if isinstance(template, list):
        return [substitute_placeholders(value, replacements) for value in template]
    if isinstance(template, str) and template in replacements:
        return copy.deepcopy(replacements[template])
    return template
