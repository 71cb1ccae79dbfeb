# src/item_models/block_items.py
"""
Block-style item models.

Reads `pack/assets/supermodel/blocks/**/*.smodel`, builds a textured cube
model for the requested UV layout, copies the texture, and queues one
ItemModelDetails per item type for the item model stage to resolve and
dispatch. Runs before the item model stage.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from contracts.details import BlockModelDetails, ItemModelDetails
from pipeline.context import StagingQueue
from pipeline.definitions import optional_str, target_types
from pipeline.errors import DefinitionError
from pipeline.fs_utils import safe_copy, walk_files
from pipeline.json_utils import read_json_mapping

from .schema import SMODEL_SUFFIX, TEXTURES_SUBDIR
from .textures import basename, has_extension


logger = logging.getLogger(__name__)

BLOCKS_SUBDIR = Path("assets/supermodel/blocks")
UV_MODES = ("flat", "cardinal")

_FACES = ("north", "east", "south", "west", "up", "down")

_FLAT_UVS = {face: [0, 0, 16, 16] for face in _FACES}

_CARDINAL_UVS = {
    "north": [8, 0, 16, 8],
    "east": [0, 8, 8, 16],
    "south": [0, 8, 8, 16],
    "west": [0, 8, 8, 16],
    "up": [8, 8, 0, 0],
    "down": [8, 0, 0, 8],
}

_THIRDPERSON = {
    "rotation": [75, 45, 0],
    "translation": [0, 2.5, 0],
    "scale": [0.375, 0.375, 0.375],
}


def _display(first_person_yaw: int, gui_yaw: int, fixed_rotation: Optional[List[int]]) -> Dict[str, Any]:
    fixed: Dict[str, Any] = {"translation": [0, 0, -14], "scale": [2.01, 2.01, 2.01]}
    if fixed_rotation is not None:
        fixed = {"rotation": fixed_rotation, **fixed}
    return {
        "thirdperson_righthand": copy.deepcopy(_THIRDPERSON),
        "thirdperson_lefthand": copy.deepcopy(_THIRDPERSON),
        "firstperson_righthand": {"rotation": [0, first_person_yaw, 0], "scale": [0.4, 0.4, 0.4]},
        "firstperson_lefthand": {"rotation": [0, first_person_yaw, 0], "scale": [0.4, 0.4, 0.4]},
        "ground": {"translation": [0, 3, 0], "scale": [0.25, 0.25, 0.25]},
        "gui": {"rotation": [30, gui_yaw, 0], "scale": [0.625, 0.625, 0.625]},
        "head": {"scale": [1.01, 1.01, 1.01]},
        "fixed": fixed,
    }


def generate_block_model(uv_mode: str, texture_name: str) -> Dict[str, Any]:
    """Cube model with every face mapped to texture slot "0"."""
    if uv_mode not in UV_MODES:
        raise DefinitionError('Invalid or missing UV mode. Must be "flat" or "cardinal".')

    texture_ref = texture_name[:-4] if texture_name.endswith(".png") else texture_name
    uvs = _FLAT_UVS if uv_mode == "flat" else _CARDINAL_UVS

    model: Dict[str, Any] = {
        "format_version": "1.21.6",
        "credit": "Made with Blockbench",
    }
    if uv_mode == "cardinal":
        model["texture_size"] = [32, 32]
    model["textures"] = {"0": texture_ref, "particle": texture_ref}
    model["elements"] = [
        {
            "from": [0, 0, 0],
            "to": [16, 16, 16],
            "faces": {face: {"uv": list(uvs[face]), "texture": "#0"} for face in _FACES},
        }
    ]
    if uv_mode == "flat":
        model["display"] = _display(first_person_yaw=45, gui_yaw=45, fixed_rotation=None)
    else:
        model["display"] = _display(first_person_yaw=135, gui_yaw=-135, fixed_rotation=[-90, 0, 0])
    return model


def get_block_item_types(details: BlockModelDetails) -> List[str]:
    return target_types(details, per_type_models=False)


def block_parent_folder(file_path: Path, source_dir: Path) -> Optional[str]:
    """First path segment when the file sits at least two folders deep."""
    parts = file_path.relative_to(source_dir).parts
    return parts[0] if len(parts) >= 3 else None


def queue_block_model(
    path: Path,
    source_dir: Path,
    build_path: Path,
    queue: StagingQueue[ItemModelDetails],
) -> int:
    """Process one block `.smodel`; returns the number of definitions queued."""
    data = read_json_mapping(path)

    uv_mode = data.get("uv")
    if uv_mode not in UV_MODES:
        raise DefinitionError('Invalid or missing UV mode. Must be "flat" or "cardinal".')

    item_types = get_block_item_types(data)  # type: ignore[arg-type]
    if not item_types:
        raise DefinitionError("No item type(s) defined.")

    texture = optional_str(data, "texture") or path.parent.name
    texture_file = texture if has_extension(texture) else f"{texture}.png"
    model_data = generate_block_model(uv_mode, texture)

    parent = block_parent_folder(path, source_dir)
    name = path.name[: -len(SMODEL_SUFFIX)]
    folder = f"{parent}/{name}" if parent else name

    dest_dir = Path(build_path) / TEXTURES_SUBDIR / folder
    safe_copy(path.parent / texture_file, dest_dir / basename(texture_file))

    for item_type in item_types:
        model: Dict[str, Any] = {"name": name, "data": copy.deepcopy(model_data)}
        if parent:
            model["parent"] = parent
        queue.add({"type": item_type, "textures": {"0": texture_file}, "model": model})  # type: ignore[typeddict-item]

    logger.info('Processed block model "%s" for %d item type(s).', path.name, len(item_types))
    return len(item_types)


def run_block_item_stage(
    pack_path: Path,
    build_path: Path,
    queue: StagingQueue[ItemModelDetails],
) -> int:
    """Queue every block model under the pack; returns the number of definitions queued."""
    source_dir = Path(pack_path) / BLOCKS_SUBDIR
    queued = 0
    for path in walk_files(source_dir, SMODEL_SUFFIX):
        try:
            queued += queue_block_model(path, source_dir, build_path, queue)
        except (DefinitionError, OSError, ValueError) as exc:
            logger.error('Failed to process block model at "%s": %s', path, exc)
        except Exception:
            logger.exception('Unexpected error processing block model at "%s"; skipping it.', path)

    if queued:
        logger.info("Queued %d block model(s) for item generation.", queued)
    return queued
