"""
Manifest model — the parsed, loosely-typed description of a utility.

A manifest maps strategy kinds to blocks. Each block carries free-form
strategy-wide defaults plus an ordered list of version records; each
record carries a ``version`` and any overrides. Only the shape needed
for resolution is enforced here — the per-kind typing happens after
the merge, in ``holen.core.models.strategy``.

Example::

    name: jq
    strategies:
      docker:
        image: "stedolan/jq:{{.Version}}"
        versions:
          - version: "1.6"
      binary:
        base_url: "https://github.com/stedolan/jq/releases/download/jq-{{.Version}}/jq-{{.MappedArch}}"
        arch_map:
          linux_amd64: linux64
          darwin_amd64: osx-amd64
        versions:
          - version: "1.6"
          - version: "1.5"
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VersionRecord(BaseModel):
    """One entry of a block's ``versions`` list.

    Any key other than ``version`` overrides the block default of the
    same name.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    version: str

    @field_validator("version", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # unquoted YAML versions arrive as int/float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def as_mapping(self) -> dict[str, Any]:
        """All keys of the record, ``version`` included."""
        return self.model_dump()


class StrategyBlock(BaseModel):
    """Strategy-wide defaults plus the ordered version records."""

    model_config = ConfigDict(extra="allow", frozen=True)

    versions: list[VersionRecord]

    @property
    def defaults(self) -> dict[str, Any]:
        """Strategy-wide keys, i.e. everything except ``versions``."""
        return dict(self.model_extra or {})

    @property
    def version_names(self) -> list[str]:
        return [record.version for record in self.versions]


class ManifestData(BaseModel):
    """A parsed manifest: the utility name and its strategy blocks."""

    name: str
    strategies: dict[str, StrategyBlock] = Field(default_factory=dict)

    def strategy_kinds(self) -> list[str]:
        """Strategy kind names in declaration order."""
        return list(self.strategies.keys())
