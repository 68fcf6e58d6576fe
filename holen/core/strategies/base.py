"""
Strategy base — the contract every execution strategy implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from holen.adapters.base import StrategyContext
from holen.core.engine.templater import TemplateContext, resolve
from holen.core.models.strategy import StrategyKind


class Strategy(ABC):
    """Acquire a utility's artifact and hand the process over to it.

    Subclasses implement ``run``. On success ``run`` does not return:
    the current process is replaced by the utility (or, without
    in-place exec, exits with the utility's status).
    """

    kind: StrategyKind

    def __init__(self, context: StrategyContext):
        self.context = context

    @property
    @abstractmethod
    def data(self) -> BaseModel:
        """The typed, merged strategy parameters."""

    @abstractmethod
    def run(self, args: list[str]) -> None:
        """Acquire, then exec with ``args``."""

    def template_context(self, version: str, arch_map: dict[str, str]) -> TemplateContext:
        return resolve(version, arch_map, self.context.system)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.data!r}>"
