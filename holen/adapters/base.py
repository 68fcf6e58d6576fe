"""
Adapter base — the capability contracts the engine depends on.

The resolver and strategies never touch the OS, the network, or the
config files directly. They go through these interfaces, which lets
tests swap in the in-memory doubles from ``holen.adapters.mock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class System(ABC):
    """Facts about, and small operations on, the running machine."""

    @abstractmethod
    def os(self) -> str:
        """Lowercase OS identifier, e.g. 'linux', 'darwin', 'windows'."""

    @abstractmethod
    def arch(self) -> str:
        """Lowercase architecture identifier, e.g. 'amd64', 'arm64'."""

    @abstractmethod
    def uid(self) -> int:
        """Numeric user id of the current process (-1 if unsupported)."""

    @abstractmethod
    def gid(self) -> int:
        """Numeric group id of the current process (-1 if unsupported)."""

    @abstractmethod
    def file_exists(self, path: str | Path) -> bool:
        """Whether a file or directory exists at ``path``."""

    @abstractmethod
    def make_executable(self, path: str | Path) -> None:
        """Set mode 0755 on ``path``."""

    @abstractmethod
    def getenv(self, key: str) -> str:
        """Environment variable value, or '' if unset."""

    @abstractmethod
    def cwd(self) -> Path:
        """Current working directory."""

    @abstractmethod
    def stdin_is_terminal(self) -> bool:
        """Whether stdin is attached to a TTY."""

    @abstractmethod
    def data_path(self) -> Path:
        """Root of holen's data directory (created if missing)."""


class ConfigGetter(ABC):
    """Read access to layered ``section.key`` configuration."""

    @abstractmethod
    def get(self, key: str) -> str:
        """Value for ``key``; '' when the key is not set anywhere."""


class Runner(ABC):
    """Process control: supervised, exec-replace, and redirected runs."""

    @abstractmethod
    def run_command(self, command: str, args: list[str], cwd: str | Path | None = None) -> None:
        """Run to completion with inherited stdio.

        Raises:
            CommandFailed: on a non-zero exit status.
        """

    def exec_command(self, command: str, args: list[str]) -> None:
        """Replace the current process with ``command args...``."""
        self.exec_command_with_env(command, args, {})

    @abstractmethod
    def exec_command_with_env(
        self,
        command: str,
        args: list[str],
        extra_env: dict[str, str],
    ) -> None:
        """Replace the current process, overlaying ``extra_env``.

        Does not return on success.
        """

    @abstractmethod
    def check_command(self, command: str, args: list[str]) -> bool:
        """Run silently and report whether it exited 0."""

    @abstractmethod
    def command_output_to_file(
        self,
        command: str,
        args: list[str],
        output_file: str | Path,
    ) -> None:
        """Run with stdout redirected into ``output_file``."""


class Downloader(ABC):
    """Artifact acquisition: files over HTTP, images from a registry."""

    @abstractmethod
    def download_file(self, url: str, local_path: str | Path) -> None:
        """Fetch ``url`` into ``local_path``, replacing any existing file."""

    @abstractmethod
    def pull_docker_image(self, image: str) -> None:
        """Make ``image`` available to the local docker daemon."""


@dataclass
class StrategyContext:
    """The capabilities a strategy runs with, passed in explicitly."""

    system: System
    config: ConfigGetter
    downloader: Downloader
    runner: Runner
