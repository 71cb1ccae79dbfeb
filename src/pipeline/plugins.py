# src/pipeline/plugins.py
"""
Directory-scanning generator loader.

Every `*.py` file below the generators directory (recursively, sorted by
relative path) is imported as a standalone module. A module counts as a
generator when it exposes a callable `generate`, taking either
(pack_path, build_path, context) or just (pack_path, build_path);
`LOAD_PRIORITY` and `GENERATOR_NAME` are optional.

Modules are executed fresh on every load() so a watch loop picks up edits
without restarting the process.
"""

from __future__ import annotations

import functools
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, List, Optional

from contracts.generator import DEFAULT_LOAD_PRIORITY, GeneratorDescriptor, GeneratorFn

from .errors import GeneratorLoadError


logger = logging.getLogger(__name__)

# Bundled generators: src/generators/
GENERATORS_DIR = Path(__file__).resolve().parents[1] / "generators"

_MODULE_PREFIX = "_supermodel_generators"


def _module_name_for(rel_path: Path) -> str:
    parts = rel_path.with_suffix("").parts
    return ".".join((_MODULE_PREFIX,) + parts)


def load_generator_module(path: Path, root: Path) -> ModuleType:
    """
    Import a single generator file.

    Raises GeneratorLoadError if the file cannot be imported.
    """
    rel = path.relative_to(root)
    name = _module_name_for(rel)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise GeneratorLoadError(f"Cannot create import spec for {rel.as_posix()}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(name, None)
        raise GeneratorLoadError(f"{rel.as_posix()}: {exc}") from exc
    return module


def _accepts_context(entry: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(entry).parameters.values()
    except (TypeError, ValueError):
        return True
    positional = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 3


def bind_entry_point(entry: Callable[..., Any]) -> GeneratorFn:
    """
    Adapt `generate` to the (pack_path, build_path, context) call.

    Entry points declared as generate(pack_path, build_path) are wrapped so
    the context is dropped; anything else is returned unchanged.
    """
    if _accepts_context(entry):
        return entry

    @functools.wraps(entry)
    def run(pack_path: Path, build_path: Path, context: Any) -> None:
        entry(pack_path, build_path)

    return run

def descriptor_from_module(module: ModuleType, origin: str) -> Optional[GeneratorDescriptor]:
    """Build a GeneratorDescriptor, or None if the module has no entry point."""
    entry = getattr(module, "generate", None)
    if not callable(entry):
        return None

    priority = getattr(module, "LOAD_PRIORITY", DEFAULT_LOAD_PRIORITY)
    if not isinstance(priority, int) or isinstance(priority, bool):
        logger.warning(
            "Generator %s has non-integer LOAD_PRIORITY %r; using %d.",
            origin,
            priority,
            DEFAULT_LOAD_PRIORITY,
        )
        priority = DEFAULT_LOAD_PRIORITY

    name = getattr(module, "GENERATOR_NAME", None)
    if name is not None and not isinstance(name, str):
        name = str(name)

    return GeneratorDescriptor(run=bind_entry_point(entry), priority=priority, name=name, origin=origin)


class DirectoryGeneratorLoader:
    """GeneratorLoader adapter that scans a directory tree for generator modules."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else GENERATORS_DIR

    def discover(self) -> List[Path]:
        """Candidate generator files in traversal order."""
        if not self.root.is_dir():
            logger.info("Generators directory %s does not exist; nothing to run.", self.root)
            return []
        return [
            p
            for p in sorted(self.root.rglob("*.py"))
            if p.is_file() and not p.name.startswith("_")
        ]

    def load(self) -> List[GeneratorDescriptor]:
        descriptors: List[GeneratorDescriptor] = []
        for path in self.discover():
            origin = path.relative_to(self.root).as_posix()
            try:
                module = load_generator_module(path, self.root)
            except GeneratorLoadError as exc:
                logger.error("Failed to load generator: %s", exc)
                continue

            descriptor = descriptor_from_module(module, origin)
            if descriptor is None:
                logger.debug("Skipping %s: no callable generate().", origin)
                continue
            descriptors.append(descriptor)
        return descriptors


class StaticGeneratorLoader:
    """GeneratorLoader over an already-built descriptor list."""

    def __init__(self, descriptors: List[GeneratorDescriptor]) -> None:
        self._descriptors = list(descriptors)

    def load(self) -> List[GeneratorDescriptor]:
        return list(self._descriptors)
