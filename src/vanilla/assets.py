# src/vanilla/assets.py
"""
Download and cache the vanilla asset snapshot for one Minecraft version.

Layout of the local cache (default ./minecraft):

    minecraft/
      .version          # version string the cache was built for
      assets/minecraft/items/<type>.json

The cache is rebuilt whenever it is missing, empty, or was built for a
different version. Failure to obtain the snapshot is fatal: without it no
safe fallback model can be synthesized for a new dispatch table.
"""

from __future__ import annotations

import logging
import shutil
import threading
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import httpx

from pipeline.errors import FatalPipelineError
from pipeline.json_utils import read_json_mapping_or_none


logger = logging.getLogger(__name__)

VANILLA_ASSETS_URL = (
    "https://github.com/PixiGeko/Minecraft-default-assets/archive/refs/heads/{version}.zip"
)
DEFAULT_CACHE_DIR = Path("minecraft")
VERSION_MARKER = ".version"
DOWNLOAD_TIMEOUT = 120.0


class VanillaAssetsUnavailable(FatalPipelineError):
    """The vanilla snapshot for the configured version cannot be obtained."""


class FallbackModelSource(Protocol):
    """Anything that can name the default model for an item type."""

    def fallback_model(self, item_type: str) -> Optional[Dict[str, Any]]:
        ...


# ---------------------------------------------------------------------------
# Cache handling
# ---------------------------------------------------------------------------

def is_cache_valid(cache_dir: Path, version: str) -> bool:
    """True if `cache_dir` holds a non-empty snapshot built for `version`."""
    if not cache_dir.is_dir() or not any(cache_dir.iterdir()):
        return False
    marker = cache_dir / VERSION_MARKER
    try:
        return marker.read_text(encoding="utf-8").strip() == version
    except OSError:
        return False


def _extract_assets(zip_path: Path, work_dir: Path, dest: Path) -> None:
    with zipfile.ZipFile(zip_path) as archive:
        archive.extractall(work_dir)

    # GitHub archives unpack to "<repo>-<branch>/assets".
    candidates = sorted(p for p in work_dir.iterdir() if p.is_dir() and (p / "assets").is_dir())
    if not candidates:
        raise VanillaAssetsUnavailable("Downloaded vanilla assets missing assets folder.")

    if dest.exists():
        shutil.rmtree(dest)
    shutil.copytree(candidates[0] / "assets", dest)


def download_vanilla_assets(
    version: str,
    cache_dir: Path,
    client: httpx.Client,
    url_template: str = VANILLA_ASSETS_URL,
) -> None:
    url = url_template.format(version=version)

    try:
        head = client.head(url, follow_redirects=True)
    except httpx.HTTPError as exc:
        raise VanillaAssetsUnavailable(f"Could not reach {url}: {exc}") from exc
    if head.status_code >= 400:
        raise VanillaAssetsUnavailable(
            f'Vanilla assets not available for version "{version}". '
            "Verify minecraft_version in config.yaml."
        )

    logger.info("Downloading vanilla assets for %s...", version)
    tmp_dir = cache_dir / "__tmp"
    tmp_dir.mkdir(parents=True, exist_ok=True)
    zip_path = tmp_dir / "vanilla.zip"
    try:
        try:
            with client.stream("GET", url, follow_redirects=True) as response:
                if response.status_code >= 400:
                    raise VanillaAssetsUnavailable(
                        f"Failed to download vanilla assets for {version} (HTTP {response.status_code})."
                    )
                with zip_path.open("wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
        except httpx.HTTPError as exc:
            raise VanillaAssetsUnavailable(f"Failed to download vanilla assets for {version}: {exc}") from exc

        try:
            _extract_assets(zip_path, tmp_dir / "extracted", cache_dir / "assets")
        except zipfile.BadZipFile as exc:
            raise VanillaAssetsUnavailable(f"Vanilla assets archive for {version} is corrupt: {exc}") from exc

        (cache_dir / VERSION_MARKER).write_text(version, encoding="utf-8")
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)

    logger.info("Vanilla assets cached at %s.", cache_dir)


def ensure_vanilla_assets(
    version: Optional[str],
    cache_dir: Path = DEFAULT_CACHE_DIR,
    client: Optional[httpx.Client] = None,
    url_template: str = VANILLA_ASSETS_URL,
) -> Path:
    """
    Return the cached `assets` directory for `version`, downloading if needed.

    Raises VanillaAssetsUnavailable when the version is not configured or the
    snapshot cannot be fetched.
    """
    if not version or not isinstance(version, str):
        raise VanillaAssetsUnavailable("Missing required config: minecraft_version")

    cache_dir = Path(cache_dir)
    if not is_cache_valid(cache_dir, version):
        if cache_dir.exists():
            shutil.rmtree(cache_dir, ignore_errors=True)
        cache_dir.mkdir(parents=True, exist_ok=True)

        owns_client = client is None
        http = client or httpx.Client(timeout=DOWNLOAD_TIMEOUT)
        try:
            download_vanilla_assets(version, cache_dir, http, url_template)
        finally:
            if owns_client:
                http.close()

    return cache_dir / "assets"


def lookup_item_model(assets_dir: Path, item_type: str) -> Optional[Dict[str, Any]]:
    """
    The `model` object of the vanilla items/<type>.json, if there is one.

    Namespaced types outside "minecraft:" have no vanilla counterpart.
    """
    if ":" in item_type and not item_type.startswith("minecraft:"):
        return None
    name = item_type[len("minecraft:"):] if item_type.startswith("minecraft:") else item_type

    data = read_json_mapping_or_none(assets_dir / "minecraft" / "items" / f"{name}.json")
    if data is None:
        return None
    model = data.get("model")
    return model if isinstance(model, dict) else None


# ---------------------------------------------------------------------------
# Lazy, thread-safe accessor
# ---------------------------------------------------------------------------

class VanillaAssets:
    """
    FallbackModelSource backed by the cached vanilla snapshot.

    The snapshot is only fetched the first time a fallback is requested, so
    builds that only touch existing dispatch tables stay offline. Safe to
    call from the merge thread pool.
    """

    def __init__(
        self,
        version: Optional[str],
        cache_dir: Path = DEFAULT_CACHE_DIR,
        client: Optional[httpx.Client] = None,
        url_template: str = VANILLA_ASSETS_URL,
    ) -> None:
        self.version = version
        self.cache_dir = Path(cache_dir)
        self._client = client
        self._url_template = url_template
        self._lock = threading.Lock()
        self._assets_dir: Optional[Path] = None
        self._error: Optional[VanillaAssetsUnavailable] = None

    def ensure(self) -> Path:
        with self._lock:
            if self._error is not None:
                raise self._error
            if self._assets_dir is None:
                try:
                    self._assets_dir = ensure_vanilla_assets(
                        self.version,
                        self.cache_dir,
                        client=self._client,
                        url_template=self._url_template,
                    )
                except VanillaAssetsUnavailable as exc:
                    # One attempt per run; later callers see the same failure.
                    self._error = exc
                    raise
            return self._assets_dir

    def fallback_model(self, item_type: str) -> Optional[Dict[str, Any]]:
        return lookup_item_model(self.ensure(), item_type)
