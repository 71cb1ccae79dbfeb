# src/item_models/resolver.py
"""
Artifact resolver for item models.

Turns each ModelWorkItem (a queued ItemModelDetails, or one read from a
`.smodel` file) into files under the build tree:

  - textures copied to   assets/supermodel/textures/item/<folder>/<file>
  - models written to    assets/supermodel/models/item/<folder>/<id>.json

and returns one ResolvedReference per item type for the dispatch merge.

Definitions are independent: resolve_all() runs them on a thread pool and a
failing definition is logged and dropped without affecting its siblings.
Results are collected in worklist order, so the merge stage sees a
deterministic sequence regardless of which task finishes first.
"""

from __future__ import annotations

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from contracts.details import ItemModelDetails
from pipeline.definitions import target_types
from pipeline.errors import DefinitionError
from pipeline.fs_utils import safe_copy
from pipeline.json_utils import load_json_or_none, write_json

from .schema import (
    MODELS_SUBDIR,
    TEXTURES_SUBDIR,
    ModelWorkItem,
    ResolvedReference,
    TextureMap,
)
from .textures import (
    align_texture_map,
    basename,
    build_resolved_texture_map,
    default_item_model,
    derive_model_base_name,
    gather_texture_map,
    has_extension,
    strip_extension,
)


logger = logging.getLogger(__name__)

ModelSource = Union[str, Dict[str, Any], None]


# ---------------------------------------------------------------------------
# Definition helpers
# ---------------------------------------------------------------------------

def get_item_types(details: ItemModelDetails) -> List[str]:
    """Per-type model map keys > `types` > `type`."""
    return target_types(details)


def resolve_model_for_type(details: ItemModelDetails, item_type: str) -> ModelSource:
    """Explicit per-type entry > single `model` > None (synthesize a default)."""
    models = details.get("models")
    if isinstance(models, dict) and models.get(item_type) is not None:
        return models[item_type]
    return details.get("model")


def extract_parent_folder(file_path: Path, source_dir: Path) -> Optional[str]:
    """
    Namespace folder from a `.smodel` file's depth under the items source dir.

      fruit/apple/red/red.smodel  -> "fruit/apple"   (4+ segments)
      fruit/red/red.smodel        -> "fruit"         (3 segments)
      red/red.smodel              -> None
    """
    try:
        parts = file_path.relative_to(source_dir).parts
    except ValueError:
        return None
    if len(parts) >= 4:
        return f"{parts[0]}/{parts[1]}"
    if len(parts) >= 3:
        return parts[0]
    return None


def _inline_parent(model: ModelSource) -> Optional[str]:
    if not isinstance(model, dict) or model.get("parent") is None:
        return None
    parent = model["parent"]
    if not isinstance(parent, str):
        raise DefinitionError(f'Inline model "parent" must be a string, got {type(parent).__name__}.')
    return parent or None


def resolve_model_folder(
    model: ModelSource,
    item_type: str,
    texture_map: TextureMap,
    parent_folder: Optional[str],
) -> str:
    """Output folder "<parent>/<base>" for one type's model."""
    if isinstance(model, str):
        base = strip_extension(basename(model))
    elif isinstance(model, dict):
        if "name" in model and "data" in model:
            base = strip_extension(basename(str(model["name"])))
        else:
            base = derive_model_base_name(texture_map, item_type)
    else:
        base = (
            strip_extension(basename(next(iter(texture_map.values()))))
            if texture_map
            else item_type
        )

    parent = _inline_parent(model) if isinstance(model, dict) and "parent" in model else parent_folder
    return f"{parent}/{base}" if parent else base


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class ArtifactResolver:
    """Writes textures/models for item definitions into one build tree."""

    def __init__(self, build_path: Path, source_dir: Path) -> None:
        self.build_path = Path(build_path)
        self.source_dir = Path(source_dir)
        self.textures_base = self.build_path / TEXTURES_SUBDIR
        self.models_base = self.build_path / MODELS_SUBDIR

    # -- public API --------------------------------------------------------

    def resolve(self, item: ModelWorkItem) -> List[ResolvedReference]:
        """
        Resolve a single definition.

        Raises DefinitionError for malformed definitions and OSError for
        files that cannot be written.
        """
        details = item.details
        item_types = get_item_types(details)
        if not item_types:
            raise DefinitionError("Definition has no defined item type(s).")

        texture_map, single_origin = gather_texture_map(details)

        if item.source_file is not None:
            parent_folder = extract_parent_folder(item.source_file, self.source_dir)
        else:
            parent_folder = _inline_parent(details.get("model"))

        references: List[ResolvedReference] = []
        for item_type in item_types:
            model = resolve_model_for_type(details, item_type)
            folder = resolve_model_folder(model, item_type, texture_map, parent_folder)
            model_out = self.models_base / folder
            model_out.mkdir(parents=True, exist_ok=True)

            if item.source_file is not None and texture_map:
                self._copy_textures(item.source_file.parent, texture_map, self.textures_base / folder)

            model_ids = self._write_model(item, item_type, model, folder, texture_map, single_origin)

            definition = details.get("definition")
            for model_id in model_ids:
                references.append(
                    ResolvedReference(
                        item_type=item_type,
                        folder=folder,
                        model_id=model_id,
                        parent=parent_folder,
                        definition=definition if isinstance(definition, dict) else None,
                    )
                )
        return references

    def resolve_all(
        self,
        items: Sequence[ModelWorkItem],
        max_workers: Optional[int] = None,
    ) -> List[ResolvedReference]:
        """Resolve every definition concurrently; failures are logged and skipped."""
        if not items:
            return []

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="resolve") as pool:
            futures = [pool.submit(self.resolve, item) for item in items]

        references: List[ResolvedReference] = []
        for item, future in zip(items, futures):
            try:
                references.extend(future.result())
            except (DefinitionError, OSError, ValueError) as exc:
                logger.error("Failed to resolve item model %s: %s", item.label, exc)
            except Exception:
                logger.exception("Unexpected error resolving item model %s; skipping it.", item.label)
        return references

    # -- internals ---------------------------------------------------------

    def _copy_textures(self, src_dir: Path, texture_map: TextureMap, dest_dir: Path) -> None:
        dest_dir.mkdir(parents=True, exist_ok=True)
        for texture in texture_map.values():
            file_name = texture if has_extension(texture) else f"{texture}.png"
            safe_copy(src_dir / file_name, dest_dir / basename(file_name))

    def _write_model(
        self,
        item: ModelWorkItem,
        item_type: str,
        model: ModelSource,
        folder: str,
        texture_map: TextureMap,
        single_origin: bool,
    ) -> List[str]:
        """Write the model for one type and return the model id(s) it produced."""
        model_out = self.models_base / folder

        if model is None:
            if not texture_map:
                raise DefinitionError(f'No textures defined for type "{item_type}".')
            model_id = derive_model_base_name(texture_map, item_type)
            write_json(model_out / f"{model_id}.json", default_item_model(folder, texture_map), indent=2)
            return [model_id]

        if isinstance(model, dict):
            name = model.get("name")
            if not name:
                raise DefinitionError(f'Internal model for type "{item_type}" is missing "name" property.')
            if model.get("data") is None:
                raise DefinitionError(f'Internal model "{name}" for type "{item_type}" is missing "data" property.')
            data = copy.deepcopy(model["data"])
            file_name = basename(str(name))
            if not file_name.endswith(".json"):
                file_name += ".json"

            self._apply_textures(data, texture_map, single_origin, folder)
            write_json(model_out / file_name, data, indent=2)
            return [strip_extension(file_name)]

        if isinstance(model, str):
            model_file = model if has_extension(model) else f"{model}.json"
            file_name = basename(model_file)
            if item.source_file is None:
                logger.warning(
                    'Skipping model file reference "%s" for type "%s": source missing.',
                    model_file,
                    item_type,
                )
                return [strip_extension(file_name)]

            src = item.source_file.parent / model_file
            if not src.is_file():
                raise DefinitionError(f'Model file "{model_file}" for type "{item_type}" not found.')

            dest = model_out / file_name
            parsed, error = load_json_or_none(src.read_text(encoding="utf-8"), context=str(src))
            if error is None and isinstance(parsed, dict):
                self._apply_textures(parsed, texture_map, single_origin, folder)
                write_json(dest, parsed, indent=2)
            else:
                # Not a JSON object; ship the file as-is.
                safe_copy(src, dest)
            return [strip_extension(file_name)]

        raise DefinitionError(f'Unsupported model value for type "{item_type}": {type(model).__name__}')

    @staticmethod
    def _apply_textures(
        model_data: Any,
        texture_map: TextureMap,
        single_origin: bool,
        folder: str,
    ) -> None:
        if not isinstance(model_data, dict):
            return
        aligned = align_texture_map(texture_map, single_origin, model_data)
        resolved = build_resolved_texture_map(aligned, folder)
        if resolved:
            model_data["textures"] = resolved
