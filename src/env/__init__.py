# src/env/__init__.py

from __future__ import annotations

from .loader import load_build_config
from .schema import BuildConfig

__all__ = ["BuildConfig", "load_build_config"]
