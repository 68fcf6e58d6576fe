"""
Process runner — the single place where holen starts other programs.

Three modes:

    run_command              supervised child, inherited stdio, we keep running
    exec_command[_with_env]  the target takes over this process
    command_output_to_file   supervised child with stdout captured to a file

plus ``check_command`` for silent capability probes.

Exec-replace has two implementations, chosen once at import time:
on POSIX the process image is replaced with ``os.execve`` so the
caller sees the target's exit status and signals directly; elsewhere
the target runs as a child and this process exits with its status.
Anything that must happen before the handover (log flushing, temp
cleanup) has to happen before calling exec — nothing runs after it.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path

from holen.adapters.base import Runner
from holen.core.errors import CommandFailed, CommandNotFound, ExecFailed

logger = logging.getLogger(__name__)


class SubprocessRunner(Runner):
    """Supervised, redirected and probe modes shared by both platforms."""

    def run_command(self, command: str, args: list[str], cwd: str | Path | None = None) -> None:
        logger.debug("Running command %s with args %s (cwd=%s)", command, args, cwd)
        try:
            result = subprocess.run([command, *args], cwd=cwd)
        except FileNotFoundError as e:
            raise CommandNotFound(command) from e

        if result.returncode != 0:
            raise CommandFailed(command, args, result.returncode)

    def check_command(self, command: str, args: list[str]) -> bool:
        logger.debug("Checking command %s with args %s", command, args)
        try:
            result = subprocess.run(
                [command, *args],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            return False
        return result.returncode == 0

    def command_output_to_file(
        self,
        command: str,
        args: list[str],
        output_file: str | Path,
    ) -> None:
        logger.debug("Running command %s with args %s > %s", command, args, output_file)
        with open(output_file, "wb") as out:
            try:
                result = subprocess.run([command, *args], stdout=out)
            except FileNotFoundError as e:
                raise CommandNotFound(command) from e

        if result.returncode != 0:
            raise CommandFailed(command, args, result.returncode)


class ExecRunner(SubprocessRunner):
    """POSIX: replace the process image in place."""

    def exec_command_with_env(
        self,
        command: str,
        args: list[str],
        extra_env: dict[str, str],
    ) -> None:
        logger.debug(
            "Exec command %s with args %s and extra env %s", command, args, extra_env
        )
        full_path = shutil.which(command)
        if full_path is None:
            raise CommandNotFound(command)

        env = {**os.environ, **extra_env}
        argv = [os.path.basename(command), *args]

        _flush_before_exec()
        try:
            os.execve(full_path, argv, env)
        except OSError as e:
            raise ExecFailed(full_path, e.strerror or str(e)) from e


class ExitRunner(SubprocessRunner):
    """No in-place exec: run as a child, then exit with its status."""

    def exec_command_with_env(
        self,
        command: str,
        args: list[str],
        extra_env: dict[str, str],
    ) -> None:
        logger.debug(
            "Exec (emulated) command %s with args %s and extra env %s",
            command, args, extra_env,
        )
        env = {**os.environ, **extra_env}
        try:
            result = subprocess.run([command, *args], env=env)
        except FileNotFoundError as e:
            raise CommandNotFound(command) from e
        except OSError as e:
            raise ExecFailed(command, e.strerror or str(e)) from e

        _flush_before_exec()
        sys.exit(result.returncode)


def _flush_before_exec() -> None:
    """Flush stdio and log handlers; buffers are lost once the image is replaced."""
    for handler in logging.getLogger().handlers:
        handler.flush()
    sys.stdout.flush()
    sys.stderr.flush()


DefaultRunner: type[SubprocessRunner] = ExecRunner if os.name == "posix" else ExitRunner
