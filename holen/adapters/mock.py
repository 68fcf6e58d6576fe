"""
In-memory doubles for every capability.

Used by the test suite to drive the resolver, strategies and git
sources without touching the network, docker, git, or the process
table. Each double records what it was asked to do.
"""

from __future__ import annotations

from pathlib import Path

from holen.adapters.base import ConfigGetter, Downloader, Runner, System
from holen.core.errors import CommandFailed


class MemSystem(System):
    """A fake machine with a settable OS, arch and file set."""

    def __init__(
        self,
        os_name: str = "linux",
        arch: str = "amd64",
        data_dir: str | Path = "/tmp/holen-data",
        working_dir: str | Path = "/work",
        terminal: bool = False,
    ):
        self._os = os_name
        self._arch = arch
        self._data_dir = Path(data_dir)
        self._cwd = Path(working_dir)
        self._terminal = terminal
        self.files: dict[str, bool] = {}
        self.executables: list[str] = []
        self.env: dict[str, str] = {}

    def os(self) -> str:
        return self._os

    def arch(self) -> str:
        return self._arch

    def uid(self) -> int:
        return 1000

    def gid(self) -> int:
        return 1000

    def file_exists(self, path: str | Path) -> bool:
        return self.files.get(str(path), False)

    def make_executable(self, path: str | Path) -> None:
        self.executables.append(str(path))

    def getenv(self, key: str) -> str:
        return self.env.get(key, "")

    def cwd(self) -> Path:
        return self._cwd

    def stdin_is_terminal(self) -> bool:
        return self._terminal

    def data_path(self) -> Path:
        return self._data_dir


class MemConfig(ConfigGetter):
    """Flat ``section.key`` → value store."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = dict(values or {})

    def get(self, key: str) -> str:
        return self.values.get(key, "")


class MemRunner(Runner):
    """Records every command as a single space-joined string.

    ``history`` holds supervised, redirected and probe runs;
    ``execs`` holds exec-replace calls (which, here, do return).
    """

    def __init__(self, fail_on: set[str] | None = None):
        self.history: list[str] = []
        self.cwds: list[str | None] = []
        self.execs: list[tuple[str, list[str], dict[str, str]]] = []
        self._fail_on = fail_on or set()

    def _record(self, command: str, args: list[str], cwd: str | Path | None = None) -> str:
        line = " ".join([command, *args])
        self.history.append(line)
        self.cwds.append(str(cwd) if cwd is not None else None)
        return line

    def run_command(self, command: str, args: list[str], cwd: str | Path | None = None) -> None:
        line = self._record(command, args, cwd)
        if line in self._fail_on:
            raise CommandFailed(command, args, 1)

    def exec_command_with_env(
        self,
        command: str,
        args: list[str],
        extra_env: dict[str, str],
    ) -> None:
        self.execs.append((command, list(args), dict(extra_env)))

    def check_command(self, command: str, args: list[str]) -> bool:
        line = self._record(command, args)
        return line not in self._fail_on

    def command_output_to_file(
        self,
        command: str,
        args: list[str],
        output_file: str | Path,
    ) -> None:
        line = self._record(command, args)
        if line in self._fail_on:
            raise CommandFailed(command, args, 1)


class MemDownloader(Downloader):
    """Records downloads and pulls; can be told to fail."""

    def __init__(self, fail: bool = False):
        self.downloads: list[tuple[str, str]] = []
        self.pulls: list[str] = []
        self._fail = fail

    def download_file(self, url: str, local_path: str | Path) -> None:
        self.downloads.append((url, str(local_path)))
        if self._fail:
            raise OSError(f"mock download failure: {url}")

    def pull_docker_image(self, image: str) -> None:
        self.pulls.append(image)
        if self._fail:
            raise CommandFailed("docker", ["pull", image], 1)
