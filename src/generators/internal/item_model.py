# src/generators/internal/item_model.py
"""
Item model generator.

Drains the item model queue, picks up `.smodel` files under
assets/supermodel/items, and merges everything into the
assets/minecraft/items/<type>.json dispatch tables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from item_models.report import render_threshold_report
from item_models.stage import run_item_model_stage
from pipeline.context import PipelineContext
from vanilla.assets import DEFAULT_CACHE_DIR, FallbackModelSource, VanillaAssets


GENERATOR_NAME = "Item Model Generator"

# Runs after every producer of item model definitions.
LOAD_PRIORITY = 10


def _fallback_source(context: PipelineContext) -> FallbackModelSource:
    injected: Optional[FallbackModelSource] = context.services.get("fallback_models")
    if injected is not None:
        return injected
    config = context.config
    if config is None:
        return VanillaAssets(version=None, cache_dir=DEFAULT_CACHE_DIR)
    return VanillaAssets(version=config.minecraft_version, cache_dir=config.vanilla_cache_dir)


def generate(pack_path: Path, build_path: Path, context: PipelineContext) -> None:
    summary = run_item_model_stage(
        pack_path,
        build_path,
        context.item_models,
        fallback_source=_fallback_source(context),
    )
    if summary and not context.services.get("quiet"):
        render_threshold_report(summary)
