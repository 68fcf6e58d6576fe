"""
Error types — everything the engine raises on its way to exec.

Every failure between "find the manifest" and "replace the process"
is a HolenError subclass. The CLI catches HolenError at the top,
prints the message and exits non-zero. Nothing here is retried.
"""

from __future__ import annotations


class HolenError(Exception):
    """Base class for all engine errors."""


# ── Resolution ──────────────────────────────────────────────────


class NoStrategyFound(HolenError):
    """None of the prioritised strategy kinds is present in the manifest."""

    def __init__(self, priority: list[str], available: list[str] | None = None):
        self.priority = priority
        self.available = available or []
        tried = ",".join(priority)
        message = f"No strategy found, tried {tried}"
        if self.available:
            message += f" (manifest offers: {', '.join(self.available)})"
        super().__init__(message)


class VersionNotFound(HolenError):
    """An explicitly requested version is not in the strategy's version list."""

    def __init__(self, version: str, strategy: str, known: list[str] | None = None):
        self.version = version
        self.strategy = strategy
        self.known = known or []
        message = f"Unable to find version {version} for {strategy} strategy"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)


class MissingRequiredField(HolenError):
    """A kind-specific required key is absent after merging."""

    def __init__(self, field: str, kind: str):
        self.field = field
        self.kind = kind
        super().__init__(f"At least '{field}' needed for {kind} strategy to work")


class TemplateError(HolenError):
    """Malformed template or reference to an unknown variable."""


# ── Acquisition ─────────────────────────────────────────────────


class ImagePullFailed(HolenError):
    """docker pull failed."""


class DownloadFailed(HolenError):
    """HTTP download or local write failed."""


class GitOperationFailed(HolenError):
    """git clone / pull / checkout removal failed."""


# ── Collaborators ───────────────────────────────────────────────


class ManifestLoadFailed(HolenError):
    """Manifest not found, unreadable, or invalid."""


class ConfigIOFailed(HolenError):
    """Configuration file unreadable, unwritable, or bad key."""


class CommandFailed(HolenError):
    """A supervised subprocess exited non-zero."""

    def __init__(self, command: str, args: list[str], returncode: int):
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        joined = " ".join([command, *args])
        super().__init__(f"Command '{joined}' exited with code {returncode}")


class CommandNotFound(HolenError):
    """The executable is not on PATH (or not executable)."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Command not found: {command}")


class ExecFailed(HolenError):
    """The operating system refused to start the executable."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Unable to exec {command}: {reason}")
