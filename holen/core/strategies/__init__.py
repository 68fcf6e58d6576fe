"""Execution strategies, keyed by kind."""

from holen.core.models.strategy import StrategyKind
from holen.core.strategies.base import Strategy
from holen.core.strategies.binary import BinaryStrategy
from holen.core.strategies.docker import DockerStrategy

STRATEGIES: dict[StrategyKind, type[Strategy]] = {
    StrategyKind.DOCKER: DockerStrategy,
    StrategyKind.BINARY: BinaryStrategy,
}

__all__ = ["STRATEGIES", "BinaryStrategy", "DockerStrategy", "Strategy"]
