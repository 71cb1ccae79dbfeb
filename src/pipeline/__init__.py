# src/pipeline/__init__.py
"""
Generator pipeline: per-run context and staging queues, generator
discovery, ordered execution, and the build/deploy/watch drivers.
"""

from __future__ import annotations

from .context import PipelineContext, StagingQueue
from .errors import (
    DefinitionError,
    FatalPipelineError,
    GeneratorLoadError,
    PipelineError,
)
from .orchestrator import order_generators, run_generators, run_pipeline
from .plugins import DirectoryGeneratorLoader, StaticGeneratorLoader

__all__ = [
    "PipelineContext",
    "StagingQueue",
    "DefinitionError",
    "FatalPipelineError",
    "GeneratorLoadError",
    "PipelineError",
    "order_generators",
    "run_generators",
    "run_pipeline",
    "DirectoryGeneratorLoader",
    "StaticGeneratorLoader",
]
