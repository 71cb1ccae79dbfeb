# src/app/main.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from env.loader import DEFAULT_CONFIG_FILE, load_build_config
from env.schema import BuildConfig
from pipeline.build import build_pack, deploy_pack, validate_deploy_path
from pipeline.errors import FatalPipelineError, PipelineError
from pipeline.plugins import GENERATORS_DIR
from pipeline.watch import watch

from .logging_config import configure_logging


logger = logging.getLogger("supermodel")


def _watch_paths(config: BuildConfig) -> List[Path]:
    paths = [config.pack_dir, config.generators_dir or GENERATORS_DIR]
    if config.config_path is not None:
        paths.append(config.config_path)
    return paths


def run_build(config: BuildConfig) -> Path:
    build_dir = build_pack(config)
    logger.info("Build successful! Output at: %s", build_dir)
    return build_dir


def run_watch(config: BuildConfig) -> None:
    validate_deploy_path(config)

    def _cycle() -> None:
        build_dir = build_pack(config)
        deploy_pack(config, build_dir)

    watch(_watch_paths(config), _cycle)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="supermodel",
        description="Build a resource pack from supermodel sources.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=("build", "watch"),
        default="build",
        help="build once (default), or build+deploy on every change",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help="Path to config.yaml (default: ./config.yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging for the builder")
    args = parser.parse_args(argv)

    configure_logging(logging.INFO, verbose=args.verbose)

    try:
        config = load_build_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Could not read config: %s", exc)
        return 1

    try:
        if args.mode == "watch":
            run_watch(config)
        else:
            run_build(config)
    except FatalPipelineError as exc:
        logger.error("Build aborted: %s", exc)
        return 1
    except PipelineError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
