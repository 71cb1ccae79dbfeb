# src/contracts/__init__.py
"""
Shared contracts for the pack builder.

Everything that crosses a module boundary (generator modules, the pipeline
orchestrator, the item/entity model stages) is described here so the
concrete packages only depend on these shapes, not on each other.
"""

from __future__ import annotations

from .details import (
    BlockModelDetails,
    EntityModelDetails,
    InlineModel,
    ItemModelDetails,
)
from .generator import (
    DEFAULT_LOAD_PRIORITY,
    Generator,
    GeneratorDescriptor,
    GeneratorFn,
    GeneratorLoader,
)

__all__ = [
    "BlockModelDetails",
    "EntityModelDetails",
    "InlineModel",
    "ItemModelDetails",
    "DEFAULT_LOAD_PRIORITY",
    "Generator",
    "GeneratorDescriptor",
    "GeneratorFn",
    "GeneratorLoader",
]
