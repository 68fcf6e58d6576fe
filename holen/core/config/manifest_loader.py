"""
Manifest loader — find and parse ``<name>.yaml`` manifests.

Manifests are looked up across an ordered list of directories; the
first directory holding ``<name>.yaml`` (or ``.yml``) wins. The list
comes from the ``manifest.paths`` config key (``os.pathsep``-separated)
or defaults to::

    ./manifests
    <data_path>/manifests
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from holen.adapters.base import ConfigGetter, System
from holen.core.errors import ConfigIOFailed, HolenError, ManifestLoadFailed
from holen.core.models.manifest import ManifestData
from holen.core.models.utility import UtilityRequest

logger = logging.getLogger(__name__)

MANIFEST_PATHS_KEY = "manifest.paths"
MANIFEST_DIR = "manifests"
MANIFEST_SUFFIXES = (".yaml", ".yml")


def manifest_search_paths(config: ConfigGetter, system: System) -> list[Path]:
    """Directories searched for manifests, in priority order."""
    try:
        configured = config.get(MANIFEST_PATHS_KEY)
    except ConfigIOFailed as e:
        logger.warning("Cannot read %s, using default paths: %s", MANIFEST_PATHS_KEY, e)
        configured = ""

    if configured:
        return [Path(p).expanduser() for p in configured.split(os.pathsep) if p]

    paths = [system.cwd() / MANIFEST_DIR]
    try:
        paths.append(system.data_path() / MANIFEST_DIR)
    except HolenError as e:
        logger.debug("No data path available: %s", e)
    return paths


def load_manifest(path: Path) -> ManifestData:
    """Parse and validate a single manifest file.

    Raises:
        ManifestLoadFailed: unreadable, not YAML, or wrong shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestLoadFailed(f"problems with reading file {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestLoadFailed(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestLoadFailed(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    data.setdefault("name", path.stem)

    try:
        manifest = ManifestData.model_validate(data)
    except ValidationError as e:
        raise ManifestLoadFailed(f"Invalid manifest {path}: {e}") from e

    logger.debug(
        "Loaded manifest '%s' with strategies %s", manifest.name, manifest.strategy_kinds()
    )
    return manifest


class ManifestFinder:
    """Locate manifests by utility name across the search path."""

    def __init__(self, search_paths: list[Path]):
        self.search_paths = list(search_paths)

    @classmethod
    def from_config(cls, config: ConfigGetter, system: System) -> ManifestFinder:
        return cls(manifest_search_paths(config, system))

    def locate(self, name: str) -> Path | None:
        """Path of the manifest for ``name``, or None."""
        for directory in self.search_paths:
            for suffix in MANIFEST_SUFFIXES:
                candidate = directory / f"{name}{suffix}"
                if candidate.is_file():
                    return candidate
        return None

    def find(self, request: UtilityRequest) -> ManifestData:
        """Load the manifest for ``request.name``.

        Raises:
            ManifestLoadFailed: no manifest found, or it is invalid.
        """
        path = self.locate(request.name)
        if path is None:
            searched = ", ".join(str(d) for d in self.search_paths)
            raise ManifestLoadFailed(
                f"manifest not found for '{request.name}' (searched: {searched})"
            )

        logger.info("attempting to load: %s", path)
        return load_manifest(path)

    def list(self, source: str | Path | None = None) -> list[str]:
        """Names of all available utilities, sorted.

        Args:
            source: Only look in this directory instead of the search path.
        """
        if source is not None:
            directory = Path(source)
            if not directory.is_dir():
                raise ManifestLoadFailed(f"manifest source is not a directory: {directory}")
            directories = [directory]
        else:
            directories = self.search_paths

        names: set[str] = set()
        for directory in directories:
            if not directory.is_dir():
                logger.debug("Manifest directory not found: %s", directory)
                continue
            for child in directory.iterdir():
                if child.is_file() and child.suffix in MANIFEST_SUFFIXES:
                    names.add(child.stem)

        return sorted(names)
