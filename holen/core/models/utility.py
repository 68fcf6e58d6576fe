"""
Utility request — what the caller asked to run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UtilityRequest(BaseModel):
    """A utility name plus an optional pinned version.

    Built once from the invoking binary's name (or the ``run``
    subcommand argument) and never changed afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}@{self.version}"
        return self.name
