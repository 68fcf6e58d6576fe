"""
Strategy descriptors — the typed form of a merged strategy.

After the resolver merges block defaults with a version record, the
flat mapping is validated into one of these models. Validation is the
only place dynamic manifest values become typed fields.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StrategyKind(str, Enum):
    """Strategy kinds the engine knows how to run."""

    DOCKER = "docker"
    BINARY = "binary"

    @classmethod
    def parse(cls, name: str) -> StrategyKind | None:
        """Map a manifest key to a kind, or None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


class DockerData(BaseModel):
    """Resolved parameters of a docker strategy.

    Attributes:
        name:        Utility name (used for logging).
        version:     Selected version string.
        image:       Image template, e.g. ``"org/tool:{{.Version}}"``.
        mount_pwd:   Mount the working directory into the container.
        docker_conn: Mount the host docker socket into the container.
        interactive: Keep stdin open (defaults to True).
        arch_map:    ``{os}_{arch}`` → substitution value.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    version: str
    image: str
    mount_pwd: bool = False
    docker_conn: bool = False
    interactive: bool = True
    arch_map: dict[str, str] = Field(default_factory=dict)


class BinaryData(BaseModel):
    """Resolved parameters of a binary-download strategy."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    version: str
    base_url: str
    arch_map: dict[str, str] = Field(default_factory=dict)
