"""
Git source — vendor a repository checkout instead of running a tool.

A source is a name plus a location string, resolved to a clone URL
once, at construction:

    owner/repo              → https://github.com/owner/repo.git
    host.tld/owner/repo     → https://host.tld/owner/repo.git
    /abs/path, ./rel, ~/x,
    *.git, scheme://…,
    user@host:path          → used verbatim

Uses the git CLI through the runner — never a git library.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from holen.adapters.base import Runner, System
from holen.core.errors import CommandFailed, CommandNotFound, GitOperationFailed

logger = logging.getLogger(__name__)

_VERBATIM_PREFIXES = ("/", ".", "~")


def resolve_git_url(spec: str) -> str:
    """Turn a source spec into a clone URL."""
    if (
        spec.startswith(_VERBATIM_PREFIXES)
        or spec.endswith(".git")
        or "://" in spec
        or "@" in spec
    ):
        return spec

    parts = spec.split("/")
    if len(parts) >= 3 and "." in parts[0] and all(parts):
        return f"https://{spec}.git"
    if len(parts) == 2 and all(parts):
        return f"https://github.com/{spec}.git"

    return spec


class GitSource:
    """A named git checkout under some base directory."""

    def __init__(self, system: System, runner: Runner, name: str, spec: str):
        self._system = system
        self._runner = runner
        self._name = name
        self._spec = spec
        self._url = resolve_git_url(spec)

    @property
    def name(self) -> str:
        return self._name

    @property
    def spec(self) -> str:
        return self._spec

    @property
    def url(self) -> str:
        return self._url

    def info(self) -> str:
        return f"git source: {self._url}"

    def checkout_path(self, base_dir: str | Path) -> Path:
        return Path(base_dir) / self._name

    def update(self, base_dir: str | Path) -> None:
        """Clone the checkout if missing, otherwise pull it."""
        target = self.checkout_path(base_dir)

        try:
            if self._system.file_exists(target):
                logger.info("Updating %s in %s", self._name, target)
                self._runner.run_command("git", ["pull"], cwd=target)
            else:
                logger.info("Cloning %s into %s", self._url, target)
                self._runner.run_command("git", ["clone", self._url, str(target)])
        except (CommandFailed, CommandNotFound) as e:
            raise GitOperationFailed(f"unable to update source {self._name}: {e}") from e

    def delete(self, base_dir: str | Path) -> None:
        """Remove the checkout; a missing checkout is not an error."""
        target = self.checkout_path(base_dir)
        if not self._system.file_exists(target):
            logger.debug("Nothing to delete at %s", target)
            return

        logger.info("Deleting %s", target)
        try:
            shutil.rmtree(target)
        except OSError as e:
            raise GitOperationFailed(f"unable to delete source {self._name}: {e}") from e

    def __repr__(self) -> str:
        return f"<GitSource name={self._name!r} url={self._url!r}>"
