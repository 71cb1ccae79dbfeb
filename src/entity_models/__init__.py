# src/entity_models/__init__.py
"""OptiFine CEM entity model stage."""

from __future__ import annotations

from .cem import CemWriter, EntityWorkItem, run_entity_model_stage

__all__ = [
    "CemWriter",
    "EntityWorkItem",
    "run_entity_model_stage",
]
