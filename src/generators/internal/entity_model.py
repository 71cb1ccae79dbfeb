# src/generators/internal/entity_model.py
"""OptiFine CEM entity model generator."""

from __future__ import annotations

from pathlib import Path

from entity_models.cem import run_entity_model_stage
from pipeline.context import PipelineContext


GENERATOR_NAME = "Entity Model Generator"
LOAD_PRIORITY = 11


def generate(pack_path: Path, build_path: Path, context: PipelineContext) -> None:
    run_entity_model_stage(pack_path, build_path, context.entity_models)
