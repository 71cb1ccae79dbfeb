# src/item_models/report.py
"""
Human-facing summary of assigned custom_model_data thresholds.

Rendered with rich so pack authors can look up which number selects which
model. Nothing in the merge logic reads this back.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from rich.console import Console
from rich.table import Table

from .schema import ThresholdAssignment


def build_threshold_table(
    summary: Mapping[str, List[ThresholdAssignment]],
    title: str = "Item model thresholds",
) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Type", style="bold")
    table.add_column("Parent")
    table.add_column("Model")
    table.add_column("custom_model_data", justify="right", style="magenta")

    for item_type in sorted(summary):
        for item in summary[item_type]:
            table.add_row(
                item_type,
                item.parent or "default",
                f"{item.folder}/{item.model_id}",
                str(item.threshold),
            )
    return table


def count_by_parent(summary: Mapping[str, List[ThresholdAssignment]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for items in summary.values():
        for item in items:
            key = item.parent or "default"
            counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items()))


def render_threshold_report(
    summary: Mapping[str, List[ThresholdAssignment]],
    console: Optional[Console] = None,
) -> None:
    """Print the threshold table (no-op for an empty summary)."""
    if not summary:
        return
    console = console or Console()
    console.print(build_threshold_table(summary))
    per_parent = ", ".join(f"{parent} {count}" for parent, count in count_by_parent(summary).items())
    console.print(f"Entries per parent: {per_parent}")
