# src/contracts/generator.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol

if TYPE_CHECKING:
    from pipeline.context import PipelineContext


DEFAULT_LOAD_PRIORITY = 1

GeneratorFn = Callable[[Path, Path, "PipelineContext"], None]


class Generator(Protocol):
    """
    Shape every generator module must satisfy.

    Module-level attributes:
      - generate(pack_path, build_path, context):  required entry point;
        generate(pack_path, build_path) is also accepted
      - LOAD_PRIORITY:  optional int, ascending = earlier (default 1)
      - GENERATOR_NAME: optional display name
    """

    def generate(
        self,
        pack_path: Path,
        build_path: Path,
        context: "PipelineContext",
    ) -> None:
        ...


@dataclass(frozen=True)
class GeneratorDescriptor:
    """
    Capability record for one loaded generator.

    Fields:
      - run:      the entry point
      - priority: sort key, lower runs first
      - name:     display name (falls back to origin)
      - origin:   where it came from, e.g. "internal/item_model.py"
    """
    run: GeneratorFn
    priority: int = DEFAULT_LOAD_PRIORITY
    name: Optional[str] = None
    origin: str = "<memory>"

    @property
    def display_name(self) -> str:
        return self.name or self.origin


class GeneratorLoader(Protocol):
    """Port for generator discovery; see pipeline.plugins for the directory adapter."""

    def load(self) -> List[GeneratorDescriptor]:
        """Return descriptors in discovery order. Must not raise for a single bad module."""
        ...
