"""
System adapter — the real machine behind the ``System`` capability.

OS and architecture are reported with the identifiers manifests use
in their arch maps (``linux_amd64``, ``darwin_arm64`` …), not the raw
``platform.machine()`` strings.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from pathlib import Path

from holen.adapters.base import System
from holen.core.errors import ConfigIOFailed

logger = logging.getLogger(__name__)

_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
}


class DefaultSystem(System):
    """System capability backed by ``os``, ``platform`` and ``sys``."""

    def os(self) -> str:
        return platform.system().lower()

    def arch(self) -> str:
        machine = platform.machine().lower()
        return _ARCH_MAP.get(machine, machine)

    def uid(self) -> int:
        return os.getuid() if hasattr(os, "getuid") else -1

    def gid(self) -> int:
        return os.getgid() if hasattr(os, "getgid") else -1

    def file_exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def make_executable(self, path: str | Path) -> None:
        Path(path).chmod(0o755)

    def getenv(self, key: str) -> str:
        return os.environ.get(key, "")

    def cwd(self) -> Path:
        return Path.cwd()

    def stdin_is_terminal(self) -> bool:
        try:
            return sys.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def data_path(self) -> Path:
        """``$XDG_DATA_HOME/holen``, else ``~/.local/share/holen``."""
        xdg_data_home = self.getenv("XDG_DATA_HOME")
        if xdg_data_home:
            path = Path(xdg_data_home) / "holen"
        else:
            home = self.getenv("HOME")
            if not home:
                raise ConfigIOFailed("$HOME environment variable not found")
            path = Path(home) / ".local" / "share" / "holen"

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOFailed(f"unable to create data directory {path}: {e}") from e
        return path

    def __repr__(self) -> str:
        return f"<DefaultSystem os={self.os()!r} arch={self.arch()!r}>"
