# src/vanilla/testing/__init__.py

from .fakes import FakeFallbackSource, UnavailableFallbackSource

__all__ = ["FakeFallbackSource", "UnavailableFallbackSource"]
