# src/pipeline/watch.py
"""
Polling watch loop for `supermodel watch`.

Watches the pack tree, the generators directory and the config file by
comparing (mtime, size) snapshots. Changes are debounced: a rebuild starts
once nothing has changed for `debounce` seconds.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple


logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_DEBOUNCE = 0.25

Snapshot = Dict[str, Tuple[float, int]]


def take_snapshot(paths: Iterable[Path]) -> Snapshot:
    """(mtime, size) for every file under the given files/directories."""
    snap: Snapshot = {}
    for root in paths:
        if root.is_file():
            candidates: Iterable[Path] = [root]
        elif root.is_dir():
            candidates = root.rglob("*")
        else:
            continue
        for path in candidates:
            try:
                if path.is_file():
                    st = path.stat()
                    snap[str(path)] = (st.st_mtime, st.st_size)
            except OSError:
                # Removed between listing and stat; the next poll sees it gone.
                continue
    return snap


class ChangeWatcher:
    """Detects create/modify/remove events between polls."""

    def __init__(self, paths: Iterable[Path]) -> None:
        self.paths: List[Path] = [Path(p) for p in paths]
        self._last = take_snapshot(self.paths)

    def poll(self) -> bool:
        """True if anything changed since the previous poll."""
        current = take_snapshot(self.paths)
        changed = current != self._last
        self._last = current
        return changed


def watch(
    paths: Iterable[Path],
    run_once: Callable[[], None],
    stop_event: Optional[threading.Event] = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    debounce: float = DEFAULT_DEBOUNCE,
    max_runs: Optional[int] = None,
) -> int:
    """
    Run `run_once` now and again after every (debounced) change.

    Returns the number of runs performed. Stops when `stop_event` is set or
    after `max_runs` runs.
    """
    stop_event = stop_event or threading.Event()
    watcher = ChangeWatcher(paths)

    run_once()
    runs = 1
    logger.info("Watch is active. Waiting for changes...")

    while not stop_event.is_set() and (max_runs is None or runs < max_runs):
        if stop_event.wait(poll_interval):
            break
        if not watcher.poll():
            continue

        # Debounce: wait until the tree is quiet.
        while not stop_event.wait(debounce):
            if not watcher.poll():
                break
        if stop_event.is_set():
            break

        run_once()
        runs += 1
        logger.info("Watch is active. Waiting for changes...")

    return runs
