# src/item_models/stage.py
"""
Item model stage: drain the staging queue, discover `.smodel` files,
resolve every definition, then merge per item type.

    queued definitions (in insertion order)
      + pack/assets/supermodel/items/**/*.smodel (sorted traversal order)
      -> ArtifactResolver.resolve_all   (fan-out, joined)
      -> DispatchMerger.merge_all       (fan-out per type, joined)

The queue is cleared once drained, even if a later step fails, so a
following run never re-emits the same definitions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from contracts.details import ItemModelDetails
from pipeline.context import StagingQueue
from pipeline.fs_utils import walk_files
from pipeline.json_utils import read_json_mapping
from vanilla.assets import FallbackModelSource

from .dispatch import DispatchMerger
from .resolver import ArtifactResolver
from .schema import SMODEL_SUFFIX, SOURCE_SUBDIR, ModelWorkItem, ThresholdAssignment


logger = logging.getLogger(__name__)


def discover_source_definitions(source_dir: Path) -> List[ModelWorkItem]:
    """Read every `.smodel` under `source_dir`; unreadable files are logged and skipped."""
    items: List[ModelWorkItem] = []
    for path in walk_files(source_dir, SMODEL_SUFFIX):
        try:
            details = read_json_mapping(path)
        except (OSError, ValueError) as exc:
            logger.error('Failed to process item model at "%s": %s', path, exc)
            continue
        items.append(ModelWorkItem(details=details, source_file=path))  # type: ignore[arg-type]
    return items


def collect_work_items(
    queue: StagingQueue[ItemModelDetails],
    source_dir: Path,
) -> List[ModelWorkItem]:
    """Queued definitions first, then files on disk."""
    items = [ModelWorkItem(details=details) for details in queue.drain()]
    items.extend(discover_source_definitions(source_dir))
    return items


def run_item_model_stage(
    pack_path: Path,
    build_path: Path,
    queue: StagingQueue[ItemModelDetails],
    fallback_source: Optional[FallbackModelSource] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, List[ThresholdAssignment]]:
    """
    Run the whole item model stage for one build.

    Returns {item_type: assignments} for reporting. Returns {} without
    touching any table when there is nothing to process.
    """
    source_dir = Path(pack_path) / SOURCE_SUBDIR
    try:
        items = collect_work_items(queue, source_dir)
    finally:
        queue.clear()

    if not items:
        return {}

    resolver = ArtifactResolver(build_path, source_dir)
    references = resolver.resolve_all(items, max_workers=max_workers)

    merger = DispatchMerger(build_path, fallback_source)
    summary = merger.merge_all(references, max_workers=max_workers)

    total = sum(len(v) for v in summary.values())
    logger.info(
        "Processed %d item model definition(s); %d entr%s across %d item type(s).",
        len(items),
        total,
        "y" if total == 1 else "ies",
        len(summary),
    )
    return summary
