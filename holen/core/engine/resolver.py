"""
Strategy resolver — from a manifest and a request to a runnable strategy.

Resolution is pure apart from one config read:

    1. priority     ``strategy.priority`` (comma-separated), default docker,binary
    2. kind         first priority entry present in the manifest
    3. version      exact match on the requested version, else the first record
    4. merge        block defaults ∪ version record, record wins
    5. arch map     copied out as ``dict[str, str]`` (absent → {})
    6. required     docker needs ``image``, binary needs ``base_url``
    7. typing       merged mapping validated into DockerData / BinaryData

Merging is flat and two-layer: nested values (``arch_map`` included)
are taken whole from whichever layer wins, never combined. Neither
input is mutated, so resolving twice yields the same result.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from holen.adapters.base import ConfigGetter, StrategyContext
from holen.core.errors import (
    ConfigIOFailed,
    ManifestLoadFailed,
    MissingRequiredField,
    NoStrategyFound,
    VersionNotFound,
)
from holen.core.models.manifest import ManifestData, StrategyBlock, VersionRecord
from holen.core.models.strategy import BinaryData, DockerData, StrategyKind
from holen.core.models.utility import UtilityRequest
from holen.core.strategies import STRATEGIES, Strategy

logger = logging.getLogger(__name__)

PRIORITY_KEY = "strategy.priority"
DEFAULT_PRIORITY = "docker,binary"

_REQUIRED_FIELDS: dict[StrategyKind, str] = {
    StrategyKind.DOCKER: "image",
    StrategyKind.BINARY: "base_url",
}

_DATA_MODELS: dict[StrategyKind, type[DockerData] | type[BinaryData]] = {
    StrategyKind.DOCKER: DockerData,
    StrategyKind.BINARY: BinaryData,
}


def strategy_priority(config: ConfigGetter) -> list[str]:
    """Strategy kinds to try, in order."""
    try:
        raw = config.get(PRIORITY_KEY)
    except ConfigIOFailed as e:
        logger.warning("Cannot read %s, using default priority: %s", PRIORITY_KEY, e)
        raw = ""

    names = [name.strip() for name in raw.split(",") if name.strip()]
    if not names:
        names = DEFAULT_PRIORITY.split(",")

    logger.debug("Priority order: %s", ",".join(names))
    return names


def select_strategy(
    manifest: ManifestData,
    priority: list[str],
) -> tuple[StrategyKind, StrategyBlock]:
    """Pick the first runnable kind from ``priority`` present in the manifest.

    Raises:
        NoStrategyFound: if no listed kind is present.
    """
    for name in priority:
        block = manifest.strategies.get(name)
        if block is None:
            continue
        kind = StrategyKind.parse(name)
        if kind is None:
            logger.warning("Strategy '%s' is not supported, skipping", name)
            continue
        return kind, block

    raise NoStrategyFound(priority, manifest.strategy_kinds())


def select_version(
    block: StrategyBlock,
    kind: StrategyKind,
    version: str | None = None,
) -> VersionRecord:
    """The record matching ``version`` exactly, or the first record.

    Raises:
        VersionNotFound: no match for an explicit version, or no records.
    """
    if version:
        for record in block.versions:
            if record.version == version:
                return record
        raise VersionNotFound(version, kind.value, block.version_names)

    if not block.versions:
        raise VersionNotFound("(any)", kind.value)
    return block.versions[0]


def merge_strategy(
    defaults: Mapping[str, Any],
    record: Mapping[str, Any],
) -> dict[str, Any]:
    """Strategy-wide defaults overlaid with a version record.

    Returns a new dict; keys in ``record`` win. ``versions`` is never
    carried into the result.
    """
    merged = {k: v for k, v in defaults.items() if k != "versions"}
    merged.update((k, v) for k, v in record.items() if k != "versions")
    return merged


def extract_arch_map(merged: Mapping[str, Any]) -> dict[str, str]:
    """The merged ``arch_map`` as ``dict[str, str]``; {} when absent."""
    raw = merged.get("arch_map")
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ManifestLoadFailed(
            f"arch_map must be a mapping, got {type(raw).__name__}"
        )
    return {str(k): str(v) for k, v in raw.items()}


def build_strategy(
    kind: StrategyKind,
    name: str,
    merged: Mapping[str, Any],
    context: StrategyContext,
) -> Strategy:
    """Validate a merged mapping into typed data and wrap it in a strategy.

    Raises:
        MissingRequiredField: the kind's required key is absent.
        ManifestLoadFailed: a value has the wrong type.
    """
    required = _REQUIRED_FIELDS[kind]
    if required not in merged:
        raise MissingRequiredField(required, kind.value)

    fields = {**merged, "name": name, "arch_map": extract_arch_map(merged)}
    try:
        data = _DATA_MODELS[kind].model_validate(fields)
    except ValidationError as e:
        raise ManifestLoadFailed(f"invalid {kind.value} strategy for {name}: {e}") from e

    return STRATEGIES[kind](context, data)


def load_strategy(
    manifest: ManifestData,
    request: UtilityRequest,
    context: StrategyContext,
) -> Strategy:
    """Resolve ``request`` against ``manifest`` into a ready-to-run strategy."""
    priority = strategy_priority(context.config)
    kind, block = select_strategy(manifest, priority)
    record = select_version(block, kind, request.version)
    merged = merge_strategy(block.defaults, record.as_mapping())

    strategy = build_strategy(kind, manifest.name or request.name, merged, context)
    logger.debug("using strategy: %r", strategy)
    return strategy
