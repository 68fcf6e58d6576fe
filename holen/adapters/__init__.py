"""Adapters — the machine, process, network and git behind the engine.

Public re-exports for convenient access.
"""

from holen.adapters.base import (
    ConfigGetter,
    Downloader,
    Runner,
    StrategyContext,
    System,
)
from holen.adapters.net.downloader import DefaultDownloader
from holen.adapters.shell.runner import DefaultRunner
from holen.adapters.system import DefaultSystem

__all__ = [
    "ConfigGetter",
    "DefaultDownloader",
    "DefaultRunner",
    "DefaultSystem",
    "Downloader",
    "Runner",
    "StrategyContext",
    "System",
]
