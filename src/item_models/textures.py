# src/item_models/textures.py

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Dict, Mapping, Optional, Tuple

from contracts.details import ItemModelDetails
from pipeline.definitions import optional_str, str_mapping

from .schema import NAMESPACE, TextureMap


SINGLE_TEXTURE_KEY = "layer0"
GENERATED_ITEM_PARENT = "minecraft:item/generated"


def strip_extension(name: str) -> str:
    idx = name.rfind(".")
    return name[:idx] if idx > 0 else name


def basename(name: str) -> str:
    return PurePosixPath(name.replace("\\", "/")).name


def has_extension(name: str) -> bool:
    return PurePosixPath(name.replace("\\", "/")).suffix != ""


def gather_texture_map(details: ItemModelDetails) -> Tuple[TextureMap, bool]:
    """
    Return (texture_map, single_origin).

    An explicit non-empty `textures` map wins. A lone `texture` is wrapped as
    {"layer0": texture} and flagged single-origin so it can later be re-keyed
    to whatever slot name the model itself uses.

    Raises DefinitionError when either field holds something other than
    strings.
    """
    textures = str_mapping(details, "textures")
    if textures:
        return textures, False
    texture = optional_str(details, "texture")
    if texture:
        return {SINGLE_TEXTURE_KEY: texture}, True
    return {}, False


def texture_path(folder: str, texture_file: str) -> str:
    return f"{NAMESPACE}:item/{folder}/{strip_extension(basename(texture_file))}"


def build_resolved_texture_map(texture_map: Mapping[str, str], folder: str) -> Optional[TextureMap]:
    if not texture_map:
        return None
    return {key: texture_path(folder, file) for key, file in texture_map.items()}


def align_texture_map(
    texture_map: Mapping[str, str],
    single_origin: bool,
    model_data: Optional[Mapping[str, Any]] = None,
) -> TextureMap:
    """
    Re-key a single-origin texture to the model's first declared texture slot.

    A model that names its only slot "0" or "texture" still binds the one
    supplied texture; multi-texture maps are returned unchanged.
    """
    if not single_origin or len(texture_map) != 1:
        return dict(texture_map)

    model_textures = model_data.get("textures") if isinstance(model_data, Mapping) else None
    if isinstance(model_textures, dict) and model_textures:
        first_key = next(iter(model_textures))
        first_value = next(iter(texture_map.values()))
        return {first_key: first_value}
    return dict(texture_map)


def derive_model_base_name(texture_map: Mapping[str, str], item_type: str) -> str:
    if texture_map:
        return strip_extension(basename(next(iter(texture_map.values()))))
    return f"{item_type}_model"


def default_item_model(folder: str, texture_map: Mapping[str, str]) -> Dict[str, Any]:
    """Flat generated item model referencing the resolved textures."""
    resolved = build_resolved_texture_map(texture_map, folder) or {
        SINGLE_TEXTURE_KEY: texture_path(folder, f"{basename(folder)}.png")
    }
    return {
        "parent": GENERATED_ITEM_PARENT,
        "textures": resolved,
    }
