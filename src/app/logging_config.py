# src/app/logging_config.py
"""
Central logging configuration for the pack builder.

Call configure_logging() from your main entrypoint once, for example:

    from app.logging_config import configure_logging
    configure_logging(verbose=args.verbose)

After that, generator, resolver and merge logs are visible on stdout.
`verbose` drops only the builder's own loggers to DEBUG; library loggers
stay at the root level so a debug run is not drowned in HTTP chatter.
"""

from __future__ import annotations

import logging
import sys
from typing import Tuple


# Top-level logger names owned by the builder. Generator modules are
# imported under _supermodel_generators (see pipeline.plugins).
BUILDER_LOGGERS: Tuple[str, ...] = (
    "app",
    "pipeline",
    "item_models",
    "entity_models",
    "vanilla",
    "env",
    "_supermodel_generators",
)

QUIET_LOGGERS: Tuple[str, ...] = ("httpx", "httpcore")


def configure_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """
    Configure root logging once, then apply builder logger levels.

    Args:
        level:   root level, only applied when the root has no handlers yet
        verbose: set the builder's loggers to DEBUG (otherwise they inherit)
    """
    root = logging.getLogger()

    # Don't duplicate handlers if someone already configured logging.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(level)

    for name in BUILDER_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.NOTSET)

    # httpx logs every request at INFO.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
