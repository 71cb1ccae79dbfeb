# src/pipeline/context.py
"""
Per-run pipeline state.

A PipelineContext is created for every pipeline run and handed to each
generator. It owns one StagingQueue per artifact category:

  - item_models:   ItemModelDetails queued by earlier generators
                   (e.g. block_item_model) and drained by item_model.
  - entity_models: EntityModelDetails drained by entity_model.

Producers only append; exactly one consumer per category drains and then
clears its queue within the same run. Contexts are never shared between
runs, so a watch loop always starts from empty queues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar

from contracts.details import EntityModelDetails, ItemModelDetails


T = TypeVar("T")


class StagingQueue(Generic[T]):
    """Ordered, append-only buffer of definitions for one category."""

    def __init__(self, category: str) -> None:
        self.category = category
        self._items: List[T] = []

    def add(self, item: T) -> None:
        self._items.append(item)

    def drain(self) -> List[T]:
        """Return a snapshot of everything queued, in insertion order."""
        return list(self._items)

    def clear(self) -> None:
        self._items = []

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"StagingQueue({self.category!r}, size={len(self._items)})"


@dataclass
class PipelineContext:
    """State shared by the generators of a single pipeline run."""

    pack_path: Path
    build_path: Path
    config: Optional[Any] = None  # env.schema.BuildConfig when run from the CLI
    item_models: StagingQueue[ItemModelDetails] = field(
        default_factory=lambda: StagingQueue("item_model")
    )
    entity_models: StagingQueue[EntityModelDetails] = field(
        default_factory=lambda: StagingQueue("entity_model")
    )
    # Optional injected collaborators (e.g. a vanilla fallback source in tests).
    services: Dict[str, Any] = field(default_factory=dict)
