# src/generators/internal/block_item_model.py
"""Queues block-style cube models for the item model generator."""

from __future__ import annotations

from pathlib import Path

from item_models.block_items import run_block_item_stage
from pipeline.context import PipelineContext


GENERATOR_NAME = "Block Item Model Generator"

# Must run before item_model (10), which drains the queue.
LOAD_PRIORITY = 9


def generate(pack_path: Path, build_path: Path, context: PipelineContext) -> None:
    run_block_item_stage(pack_path, build_path, context.item_models)
