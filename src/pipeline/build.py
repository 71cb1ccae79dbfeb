# src/pipeline/build.py
"""
Full pack build and deployment.

build_pack():
  1. empty the build root
  2. copy the static pack (minus ignored files) into <build_root>/<pack>-<version>
  3. drop the copied assets/supermodel source tree
  4. run every generator with a fresh PipelineContext

Because the build directory is re-seeded from the pack each time, dispatch
tables always merge against the hand-edited state in the pack, and two
builds of an unchanged pack produce identical output.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from contracts.generator import GeneratorLoader
from env.schema import BuildConfig

from .context import PipelineContext
from .errors import PipelineError
from .fs_utils import copy_tree, empty_dir
from .orchestrator import run_pipeline
from .plugins import DirectoryGeneratorLoader


logger = logging.getLogger(__name__)

SOURCE_ASSETS_SUBDIR = Path("assets/supermodel")


def make_context(
    config: BuildConfig,
    services: Optional[Dict[str, Any]] = None,
) -> PipelineContext:
    return PipelineContext(
        pack_path=config.pack_dir,
        build_path=config.build_dir,
        config=config,
        services=dict(services or {}),
    )


def build_pack(
    config: BuildConfig,
    loader: Optional[GeneratorLoader] = None,
    services: Optional[Dict[str, Any]] = None,
) -> Path:
    """Build the pack and return the build directory."""
    build_dir = config.build_dir
    logger.info("Build in progress: %s", config.target_name)

    empty_dir(config.build_root)
    build_dir.mkdir(parents=True, exist_ok=True)

    if config.pack_dir.is_dir():
        try:
            copied = copy_tree(config.pack_dir, build_dir, config.ignored_files)
            shutil.rmtree(build_dir / SOURCE_ASSETS_SUBDIR, ignore_errors=True)
            logger.debug("Copied %d static pack file(s).", copied)
        except OSError as exc:
            logger.warning("Failed to copy static pack files: %s", exc)
    else:
        logger.warning("Pack directory %s does not exist; building generators only.", config.pack_dir)

    loader = loader or DirectoryGeneratorLoader(config.generators_dir)
    context = make_context(config, services)
    run_pipeline(config.pack_dir, build_dir, loader=loader, context=context)
    return build_dir


def validate_deploy_path(config: BuildConfig) -> Path:
    path = config.deploy_path
    if path is None or not path.is_dir():
        raise PipelineError(
            f'Deployment path "{path}" is invalid or unreachable. Check deploy_path in config.yaml.'
        )
    return path


def deploy_pack(config: BuildConfig, build_dir: Path) -> Path:
    """Replace <deploy_path>/<pack>-<version> with the build output."""
    destination = validate_deploy_path(config) / config.target_name
    logger.info("Copying to %s...", destination)

    empty_dir(destination)
    copy_tree(build_dir, destination)

    logger.info("Deployment successful.")
    return destination
