# src/app/__init__.py
"""
Application entrypoints for the pack builder.

- main: CLI entry (`supermodel build` / `supermodel watch`)
- configure_logging: root logging setup
"""

from __future__ import annotations

from .logging_config import configure_logging
from .main import main

__all__ = [
    "configure_logging",
    "main",
]
