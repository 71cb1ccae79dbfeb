# src/vanilla/__init__.py
"""
Vanilla reference dataset: default item models for a Minecraft version.

    from vanilla import VanillaAssets

    assets = VanillaAssets(version="1.21.4")
    fallback = assets.fallback_model("apple")
"""

from __future__ import annotations

from .assets import (
    FallbackModelSource,
    VanillaAssets,
    VanillaAssetsUnavailable,
    ensure_vanilla_assets,
    lookup_item_model,
)

__all__ = [
    "FallbackModelSource",
    "VanillaAssets",
    "VanillaAssetsUnavailable",
    "ensure_vanilla_assets",
    "lookup_item_model",
]
