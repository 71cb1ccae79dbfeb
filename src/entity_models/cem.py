# src/entity_models/cem.py
"""
OptiFine CEM output for entity model definitions.

Output directory: assets/minecraft/optifine/cem

For every entity type a definition targets, the writer:
  - assigns the next model index N (highest "models.N=" already present in
    <type>.properties, default 1, plus one)
  - writes <type><N>.jem (inline model JSON, or the referenced .jem file)
  - appends a properties section:

        # [SM] Generated from zombie_hat.smodel   (or "Generated internally")
        models.N=N
        <key with ^ -> N>=<value with ^ -> N>

Definitions are processed one after another in loadPriority order so index
assignment is reproducible. Each <type>.properties is written once at the end.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from contracts.details import EntityModelDetails
from pipeline.context import StagingQueue
from pipeline.definitions import optional_str, str_list, target_types
from pipeline.errors import DefinitionError
from pipeline.fs_utils import safe_copy, walk_files
from pipeline.json_utils import read_json_mapping, write_json


logger = logging.getLogger(__name__)

SOURCE_SUBDIR = Path("assets/supermodel/entities")
CEM_SUBDIR = Path("assets/minecraft/optifine/cem")
SMODEL_SUFFIX = ".smodel"
DEFAULT_LOAD_PRIORITY = 5

_MODEL_INDEX_RE = re.compile(r"models\.(\d+)=")


@dataclass
class EntityWorkItem:
    details: EntityModelDetails
    source_file: Optional[Path] = None

    @property
    def load_priority(self) -> int:
        value = self.details.get("loadPriority", DEFAULT_LOAD_PRIORITY)
        return value if isinstance(value, int) else DEFAULT_LOAD_PRIORITY


def get_entity_types(details: EntityModelDetails) -> List[str]:
    return target_types(details)


def _first_model_source(details: EntityModelDetails) -> Any:
    models = details.get("models")
    if isinstance(models, dict) and models:
        return next(iter(models.values()))
    return details.get("model")


def get_properties(details: EntityModelDetails) -> Dict[str, Any]:
    """Extra properties lines; keys must be strings, values scalars."""
    properties = details.get("properties")
    if properties is None:
        return {}
    if not isinstance(properties, dict):
        raise DefinitionError('"properties" must be an object.')
    for key, value in properties.items():
        if not isinstance(key, str) or isinstance(value, (dict, list)):
            raise DefinitionError(f"Property {key!r} must map a string key to a scalar value.")
    return dict(properties)


def build_properties_entry(origin: Optional[str], details: EntityModelDetails, index: str) -> str:
    source = f"from {origin}" if origin else "internally"
    section = f"\n# [SM] Generated {source}\nmodels.{index}={index}\n"
    for key, value in get_properties(details).items():
        section += f"{key.replace('^', index)}={str(value).replace('^', index)}\n"
    return section


def _texture_names(details: EntityModelDetails) -> List[str]:
    single = optional_str(details, "texture")
    return str_list(details, "textures") or ([single] if single else [])


class CemWriter:
    """Accumulates CEM models and properties for one build tree."""

    def __init__(self, build_path: Path) -> None:
        self.output_dir = Path(build_path) / CEM_SUBDIR
        self._properties: Dict[str, str] = {}
        self._indices: Dict[str, int] = {}

    def _existing_properties(self, entity_type: str) -> str:
        if entity_type not in self._properties:
            path = self.output_dir / f"{entity_type}.properties"
            try:
                self._properties[entity_type] = path.read_text(encoding="utf-8")
            except OSError:
                self._properties[entity_type] = ""
        return self._properties[entity_type]

    def next_index(self, entity_type: str) -> int:
        if entity_type not in self._indices:
            content = self._existing_properties(entity_type)
            found = [int(m) for m in _MODEL_INDEX_RE.findall(content)]
            self._indices[entity_type] = max(found) if found else 1
        self._indices[entity_type] += 1
        return self._indices[entity_type]

    def add(self, item: EntityWorkItem) -> int:
        """Write one definition; returns the number of variants written."""
        details = item.details
        entity_types = get_entity_types(details)
        if not entity_types:
            raise DefinitionError("Definition has no defined entity type(s).")
        get_properties(details)

        first = _first_model_source(details)
        inline = isinstance(first, dict)
        if not inline and first is not None and not isinstance(first, str):
            raise DefinitionError("Entity model must be an inline object or a .jem file name.")
        textures = _texture_names(details)
        origin = item.source_file.name if item.source_file else None
        models = details.get("models")

        for entity_type in entity_types:
            index = str(self.next_index(entity_type))
            self._properties[entity_type] += build_properties_entry(origin, details, index)

            source = models.get(entity_type) if isinstance(models, dict) else details.get("model")
            target = self.output_dir / f"{entity_type}{index}.jem"
            if inline:
                write_json(target, source, indent=2)
            elif item.source_file is not None:
                self._copy_assets(item.source_file, textures, source, target)
        return len(entity_types)

    def _copy_assets(
        self,
        source_file: Path,
        textures: List[str],
        model_name: Optional[str],
        target: Path,
    ) -> None:
        src_dir = source_file.parent
        base = source_file.name[: -len(SMODEL_SUFFIX)]

        model_file = model_name or base
        if not model_file.endswith(".jem"):
            model_file += ".jem"
        safe_copy(src_dir / model_file, target)

        for texture in textures or [f"{base}.png"]:
            safe_copy(src_dir / texture, self.output_dir / texture)

    def flush(self) -> List[Path]:
        """Write every touched <type>.properties file."""
        written: List[Path] = []
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for entity_type, content in self._properties.items():
            if entity_type not in self._indices:
                continue
            path = self.output_dir / f"{entity_type}.properties"
            path.write_text(content.strip() + "\n", encoding="utf-8")
            written.append(path)
        return written


def discover_entity_definitions(source_dir: Path) -> List[EntityWorkItem]:
    items: List[EntityWorkItem] = []
    for path in walk_files(source_dir, SMODEL_SUFFIX):
        try:
            details = read_json_mapping(path)
        except (OSError, ValueError) as exc:
            logger.error('Failed to process model file at "%s": %s', path, exc)
            continue
        items.append(EntityWorkItem(details=details, source_file=path))  # type: ignore[arg-type]
    return items


def run_entity_model_stage(
    pack_path: Path,
    build_path: Path,
    queue: StagingQueue[EntityModelDetails],
) -> int:
    """Drain the entity queue plus source files; returns variants written."""
    try:
        items = [EntityWorkItem(details=details) for details in queue.drain()]
        items.extend(discover_entity_definitions(Path(pack_path) / SOURCE_SUBDIR))
    finally:
        queue.clear()

    if not items:
        return 0

    items.sort(key=lambda item: item.load_priority)

    writer = CemWriter(build_path)
    variants = 0
    for item in items:
        try:
            variants += writer.add(item)
        except (DefinitionError, OSError, ValueError, TypeError) as exc:
            logger.error("Failed to process entity model %s: %s", item.source_file or "<queued>", exc)
        except Exception:
            logger.exception("Unexpected error processing entity model %s; skipping it.", item.source_file or "<queued>")

    writer.flush()
    logger.info("Generated %d entity model(s) with a total of %d model variant(s).", len(items), variants)
    return variants
