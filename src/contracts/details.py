# src/contracts/details.py
"""
Source-level definition shapes.

These are the JSON objects found in `.smodel` files under
`pack/assets/supermodel/...`, and the same shapes generators push onto the
staging queues of a PipelineContext. Runtime representation is just a dict;
the TypedDicts document the intended keys.
"""

from __future__ import annotations

from typing import Any, Dict, List, TypedDict, Union


class InlineModel(TypedDict, total=False):
    """
    Raw model data handed over in-process instead of a filename:

      {
        "parent": "palm",            # optional namespace folder
        "name": "glowing_review",    # model id (".json" optional)
        "data": {...}                # the model tree itself
      }
    """
    parent: str
    name: str
    data: Dict[str, Any]


ModelSource = Union[str, InlineModel]


class ItemModelDetails(TypedDict, total=False):
    """
    One item model definition.

      - type / types:
          Item type(s) whose dispatch table gets an entry, e.g. "apple".
      - texture / textures:
          Single texture filename, or slot -> filename map for multi-texture
          models. Files live next to the .smodel file.
      - model / models:
          Model filename or InlineModel, or a per-type map of either.
          Absent means a flat generated item model is synthesized.
      - definition:
          Optional override template for the dispatch entry; string leaves
          "$model", "$type", "$parent", "$folder", "$id" and "$fallback" are
          replaced when the entry is written.
    """
    type: str
    types: List[str]
    texture: str
    textures: Dict[str, str]
    model: ModelSource
    models: Dict[str, ModelSource]
    definition: Dict[str, Any]


class BlockModelDetails(TypedDict, total=False):
    """Block-style item model: a textured cube with a fixed UV layout."""
    type: str
    types: List[str]
    texture: str
    uv: str  # "flat" | "cardinal"


class EntityModelDetails(TypedDict, total=False):
    """
    OptiFine CEM entity model definition.

    `properties` values and keys may contain "^", which is replaced by the
    model index assigned to this definition.
    """
    type: str
    types: List[str]
    texture: str
    textures: List[str]
    model: Union[str, Dict[str, Any]]
    models: Dict[str, Union[str, Dict[str, Any]]]
    properties: Dict[str, str]
    loadPriority: int  # lower loads first; default 5
