"""
Configuration loader — layered ``section.key`` settings.

Two YAML files, read in order, the later one winning:

    system   /etc/holen/config.yml        (HOLEN_SYSTEM_CONFIG overrides)
    user     $XDG_CONFIG_HOME/holen/config.yml
             or ~/.config/holen/config.yml

Each file is a mapping of sections to flat key/value mappings:

    strategy:
      priority: binary,docker
    manifest:
      paths: /opt/manifests:./manifests

Keys are addressed as ``section.key``. A key set nowhere reads as ''.
Writes go to exactly one layer and are atomic (temp file + rename).
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from holen.adapters.base import ConfigGetter
from holen.core.errors import ConfigIOFailed

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "config.yml"
SYSTEM_CONFIG_PATH = Path("/etc/holen") / CONFIG_FILE


def default_config_paths() -> tuple[Path, Path]:
    """(system, user) config file paths for the current environment."""
    system = Path(os.environ.get("HOLEN_SYSTEM_CONFIG") or SYSTEM_CONFIG_PATH)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base_dir = Path(xdg_config_home) / "holen"
    else:
        home = os.environ.get("HOME")
        if not home:
            raise ConfigIOFailed("$HOME environment variable not found")
        base_dir = Path(home) / ".config" / "holen"

    return system, base_dir / CONFIG_FILE


def split_key(key: str) -> tuple[str, str]:
    """``"section.key"`` → ``("section", "key")``. The key may contain dots."""
    section, sep, name = key.partition(".")
    if not sep or not section or not name:
        raise ConfigIOFailed(f"key '{key}' must be of the form section.key")
    return section, name


def _as_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


class ConfigClient(ConfigGetter):
    """Read/write access to the system and user config layers."""

    def __init__(self, system_config: Path, user_config: Path):
        self.system_config = Path(system_config)
        self.user_config = Path(user_config)

    @classmethod
    def default(cls) -> ConfigClient:
        system, user = default_config_paths()
        return cls(system_config=system, user_config=user)

    # ── Read ────────────────────────────────────────────────────

    def get(self, key: str) -> str:
        section, name = split_key(key)
        return self._merged().get(section, {}).get(name, "")

    def get_all(self) -> dict[str, str]:
        """Every set key, flattened to ``section.key`` → value."""
        flat: dict[str, str] = {}
        for section, values in self._merged().items():
            for name, value in values.items():
                flat[f"{section}.{name}"] = value
        return flat

    # ── Write ───────────────────────────────────────────────────

    def set(self, key: str, value: str, system: bool = False) -> None:
        section, name = split_key(key)
        path = self._layer_path(system)
        data = self._read(path)
        data.setdefault(section, {})[name] = value
        self._write(path, data)
        logger.info("Set %s in %s", key, path)

    def unset(self, key: str, system: bool = False) -> None:
        section, name = split_key(key)
        path = self._layer_path(system)
        data = self._read(path)

        values = data.get(section)
        if values is None or name not in values:
            logger.debug("Key %s not set in %s", key, path)
            return

        del values[name]
        if not values:
            del data[section]
        self._write(path, data)
        logger.info("Unset %s in %s", key, path)

    # ── Helpers ─────────────────────────────────────────────────

    def _layer_path(self, system: bool) -> Path:
        return self.system_config if system else self.user_config

    def _merged(self) -> dict[str, dict[str, str]]:
        merged: dict[str, dict[str, str]] = {}
        for path in (self.system_config, self.user_config):
            for section, values in self._read(path).items():
                merged.setdefault(section, {}).update(values)
        return merged

    def _read(self, path: Path) -> dict[str, dict[str, str]]:
        """Load one layer. A missing file is an empty layer."""
        if not path.is_file():
            return {}

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigIOFailed(f"failure to load config {path}: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigIOFailed(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigIOFailed(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

        layer: dict[str, dict[str, str]] = {}
        for section, values in data.items():
            if not isinstance(values, dict):
                logger.warning("Ignoring non-mapping section '%s' in %s", section, path)
                continue
            layer[str(section)] = {str(k): _as_str(v) for k, v in values.items()}
        return layer

    def _write(self, path: Path, data: dict[str, dict[str, str]]) -> None:
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".config_", suffix=".tmp")
            tmp = Path(tmp_path)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                tmp.replace(path)
            except Exception:
                tmp.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ConfigIOFailed(f"unable to save {path}: {e}") from e
        logger.debug("Config saved to %s", path)
