# src/item_models/__init__.py
"""
Item model stage: resolve item model definitions into model/texture files
and merge them into per-type custom_model_data dispatch tables.
"""

from __future__ import annotations

from .dispatch import DispatchMerger, default_dispatch_table, load_dispatch_table
from .resolver import ArtifactResolver
from .schema import ModelWorkItem, ResolvedReference, ThresholdAssignment
from .stage import run_item_model_stage
from .thresholds import legacy_string_hash, threshold_for

__all__ = [
    "ArtifactResolver",
    "DispatchMerger",
    "ModelWorkItem",
    "ResolvedReference",
    "ThresholdAssignment",
    "default_dispatch_table",
    "legacy_string_hash",
    "load_dispatch_table",
    "run_item_model_stage",
    "threshold_for",
]
