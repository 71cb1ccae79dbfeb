# src/pipeline/orchestrator.py
"""
Generator pipeline orchestrator.

run_pipeline() loads every generator, orders them by priority and runs them
one at a time against the same pack/build path pair and PipelineContext.

Ordering is load-bearing: a draining generator (e.g. item_model, priority
10) assumes every producer for its staging queue has already finished.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from contracts.generator import GeneratorDescriptor, GeneratorLoader

from .context import PipelineContext
from .errors import FatalPipelineError
from .plugins import DirectoryGeneratorLoader


logger = logging.getLogger(__name__)


def order_generators(descriptors: Sequence[GeneratorDescriptor]) -> List[GeneratorDescriptor]:
    """Ascending by priority; sorted() is stable so ties keep discovery order."""
    return sorted(descriptors, key=lambda d: d.priority)


def run_generators(
    descriptors: Sequence[GeneratorDescriptor],
    context: PipelineContext,
) -> List[GeneratorDescriptor]:
    """
    Run generators sequentially in priority order.

    Returns the descriptors that completed without raising. Ordinary
    exceptions are logged and the next generator runs; FatalPipelineError
    propagates to the caller.
    """
    completed: List[GeneratorDescriptor] = []
    for descriptor in order_generators(descriptors):
        logger.info(
            "Running generator %s (priority %d)...",
            descriptor.display_name,
            descriptor.priority,
        )
        try:
            descriptor.run(context.pack_path, context.build_path, context)
        except FatalPipelineError:
            logger.error("Generator %s aborted the build.", descriptor.display_name)
            raise
        except Exception:
            logger.exception("Generator %s failed; continuing.", descriptor.display_name)
            continue
        completed.append(descriptor)
    return completed


def run_pipeline(
    pack_path: Path,
    build_path: Path,
    loader: Optional[GeneratorLoader] = None,
    context: Optional[PipelineContext] = None,
) -> PipelineContext:
    """
    Main entry point: discover, order and run all generators.

    A fresh PipelineContext is created unless one is passed in.
    """
    loader = loader or DirectoryGeneratorLoader()
    if context is None:
        context = PipelineContext(pack_path=Path(pack_path), build_path=Path(build_path))

    descriptors = loader.load()
    if not descriptors:
        logger.info("No generators found.")
        return context

    run_generators(descriptors, context)
    return context
