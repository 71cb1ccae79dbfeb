# src/item_models/schema.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from contracts.details import ItemModelDetails


NAMESPACE = "supermodel"

# Relative to the pack / build root.
SOURCE_SUBDIR = Path("assets/supermodel/items")
TEXTURES_SUBDIR = Path("assets/supermodel/textures/item")
MODELS_SUBDIR = Path("assets/supermodel/models/item")
ITEM_DEFS_SUBDIR = Path("assets/minecraft/items")

SMODEL_SUFFIX = ".smodel"

TextureMap = Dict[str, str]


@dataclass
class ModelWorkItem:
    """One definition to resolve, plus the file it came from (None when queued)."""
    details: ItemModelDetails
    source_file: Optional[Path] = None

    @property
    def label(self) -> str:
        return str(self.source_file) if self.source_file else "<queued>"


@dataclass(frozen=True)
class ResolvedReference:
    """
    A written model, ready to be merged into `<item_type>.json`.

    Fields:
      - item_type:  dispatch table this reference belongs to
      - folder:     output folder under models/item (may contain "/")
      - model_id:   model file stem
      - parent:     namespace folder derived for the definition, if any
      - definition: override template from the source definition, if any
    """
    item_type: str
    folder: str
    model_id: str
    parent: Optional[str] = None
    definition: Optional[Dict[str, Any]] = None

    @property
    def key(self) -> str:
        """Hash input for the threshold: "<folder>/<id>"."""
        return f"{self.folder}/{self.model_id}"

    @property
    def model_path(self) -> str:
        return f"{NAMESPACE}:item/{self.folder}/{self.model_id}"


@dataclass(frozen=True)
class ThresholdAssignment:
    """Reporting record of where a reference landed in its dispatch table."""
    item_type: str
    folder: str
    model_id: str
    threshold: int
    parent: Optional[str] = None
