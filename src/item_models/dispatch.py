# src/item_models/dispatch.py
"""
Dispatch merge engine.

Folds ResolvedReferences into `assets/minecraft/items/<type>.json`:

    {
      "model": {
        "type": "range_dispatch",
        "property": "custom_model_data",
        "fallback": {...},
        "index": 0,
        "entries": [
          {"threshold": 3582600, "model": {...}},   # custom model
          {"threshold": 3582601, "model": {...}},   # fallback-echo
          ...
        ]
      }
    }

Per type, in order:
  1. load the existing table, or synthesize one (fallback from the vanilla
     snapshot when available, else "item/<type>")
  2. pop the trailing entry (the previous fallback-echo)
  3. for each reference: threshold = hash("<folder>/<id>"); a threshold
     already in use is skipped with a warning, never re-slotted
  4. append the entry, then a fallback-echo at threshold + 1 if free
  5. rewrite the table

Each type owns exactly one file and one merge task, so types are merged
concurrently without locking. Types with no references are never touched.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from pipeline.errors import FatalPipelineError
from pipeline.json_utils import read_json_mapping_or_none, write_json
from vanilla.assets import FallbackModelSource

from .schema import ITEM_DEFS_SUBDIR, ResolvedReference, ThresholdAssignment
from .substitution import substitute_placeholders
from .thresholds import threshold_for_key


logger = logging.getLogger(__name__)

DISPATCH_TYPE = "range_dispatch"
DISPATCH_PROPERTY = "custom_model_data"
TABLE_INDENT = 4


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------

def placeholder_fallback(item_type: str) -> Dict[str, Any]:
    return {"type": "model", "model": f"item/{item_type}"}


def default_dispatch_table(
    item_type: str,
    fallback_model: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "model": {
            "type": DISPATCH_TYPE,
            "property": DISPATCH_PROPERTY,
            "fallback": dict(fallback_model or placeholder_fallback(item_type)),
            "index": 0,
            "entries": [],
        }
    }


def load_dispatch_table(path: Path) -> Optional[Dict[str, Any]]:
    """Existing table if it parses and carries a "model" object, else None."""
    data = read_json_mapping_or_none(path)
    if data is None or not isinstance(data.get("model"), dict):
        return None
    return data


def table_path(build_path: Path, item_type: str) -> Path:
    return Path(build_path) / ITEM_DEFS_SUBDIR / f"{item_type}.json"


def build_entry_model(ref: ResolvedReference, fallback_model: Dict[str, Any]) -> Any:
    """Model for a reference's entry: substituted template, or a plain model reference."""
    if ref.definition is None:
        return {"type": "model", "model": ref.model_path}
    return substitute_placeholders(
        ref.definition,
        {
            "$fallback": fallback_model,
            "$model": ref.model_path,
            "$type": ref.item_type,
            "$parent": ref.parent or "",
            "$folder": ref.folder,
            "$id": ref.model_id,
        },
    )


def group_by_type(references: Iterable[ResolvedReference]) -> Dict[str, List[ResolvedReference]]:
    """Group references per item type, keeping first-seen type order and reference order."""
    grouped: Dict[str, List[ResolvedReference]] = {}
    for ref in references:
        grouped.setdefault(ref.item_type, []).append(ref)
    return grouped


# ---------------------------------------------------------------------------
# Merge engine
# ---------------------------------------------------------------------------

class DispatchMerger:
    """Merges references into the dispatch tables of one build tree."""

    def __init__(
        self,
        build_path: Path,
        fallback_source: Optional[FallbackModelSource] = None,
    ) -> None:
        self.build_path = Path(build_path)
        self.fallback_source = fallback_source

    def _synthesize(self, item_type: str) -> Dict[str, Any]:
        vanilla = self.fallback_source.fallback_model(item_type) if self.fallback_source else None
        if vanilla is None:
            logger.debug("No vanilla model for %s; using placeholder fallback.", item_type)
        return default_dispatch_table(item_type, vanilla)

    def merge_type(
        self,
        item_type: str,
        references: List[ResolvedReference],
    ) -> List[ThresholdAssignment]:
        """Merge all references of one type into its table and persist it."""
        path = table_path(self.build_path, item_type)

        table = load_dispatch_table(path)
        if table is None:
            table = self._synthesize(item_type)

        dispatch = table["model"]
        entries = dispatch.get("entries")
        if not isinstance(entries, list):
            entries = []
            dispatch["entries"] = entries

        if entries:
            entries.pop()

        used: Set[int] = {
            entry["threshold"]
            for entry in entries
            if isinstance(entry, dict) and isinstance(entry.get("threshold"), int)
        }

        fallback_model = dispatch.get("fallback")
        if not isinstance(fallback_model, dict):
            fallback_model = placeholder_fallback(item_type)

        assigned: List[ThresholdAssignment] = []
        for ref in references:
            threshold = threshold_for_key(ref.key)
            if threshold in used:
                logger.warning(
                    'Skipping entry for "%s" in %s: threshold %d already in use.',
                    ref.key,
                    item_type,
                    threshold,
                )
                continue

            entries.append({"threshold": threshold, "model": build_entry_model(ref, fallback_model)})
            used.add(threshold)
            assigned.append(
                ThresholdAssignment(
                    item_type=item_type,
                    folder=ref.folder,
                    model_id=ref.model_id,
                    threshold=threshold,
                    parent=ref.parent,
                )
            )
            logger.debug('Added entry for "%s" at threshold %d.', ref.key, threshold)

            echo = threshold + 1
            if echo not in used:
                entries.append({"threshold": echo, "model": dict(fallback_model)})
                used.add(echo)

        write_json(path, table, indent=TABLE_INDENT)
        return assigned

    def merge_all(
        self,
        references: Iterable[ResolvedReference],
        max_workers: Optional[int] = None,
    ) -> Dict[str, List[ThresholdAssignment]]:
        """
        Merge every type concurrently.

        Returns {item_type: assignments} for the types that were written.
        A type that fails with an ordinary error is logged and left out; a
        FatalPipelineError is re-raised once all tasks have finished.
        """
        grouped = group_by_type(references)
        if not grouped:
            return {}

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dispatch") as pool:
            futures = {
                item_type: pool.submit(self.merge_type, item_type, refs)
                for item_type, refs in grouped.items()
            }

        results: Dict[str, List[ThresholdAssignment]] = {}
        fatal: Optional[FatalPipelineError] = None
        for item_type, future in futures.items():
            try:
                results[item_type] = future.result()
            except FatalPipelineError as exc:
                fatal = fatal or exc
            except (OSError, ValueError, TypeError, KeyError) as exc:
                logger.error("Failed to update item definition for %s: %s", item_type, exc)
        if fatal is not None:
            raise fatal
        return results
