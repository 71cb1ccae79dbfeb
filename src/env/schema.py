# BuildConfig dataclass
# src/env/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class BuildConfig:
    """Resolved build configuration (config.yaml)."""
    pack_name: str
    version: str
    minecraft_version: str         # selects the vanilla asset snapshot
    deploy_path: Optional[Path]    # required for watch / deploy
    pack_dir: Path                 # source pack tree
    build_root: Path               # emptied on every build
    generators_dir: Optional[Path] # None -> bundled src/generators
    vanilla_cache_dir: Path
    ignored_files: List[str] = field(default_factory=list)
    config_path: Optional[Path] = None

    @property
    def target_name(self) -> str:
        """Folder name of the built pack: "<pack_name>-<version>"."""
        return f"{self.pack_name}-{self.version}"

    @property
    def build_dir(self) -> Path:
        return self.build_root / self.target_name
