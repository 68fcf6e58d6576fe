"""
Run use case — resolve a utility and hand the process over to it.

This is the whole vertical slice: find the manifest, resolve the
strategy, acquire the artifact, exec. On success nothing after
``strategy.run`` executes; every failure before that point surfaces
as a HolenError.
"""

from __future__ import annotations

import logging

from holen.adapters.base import StrategyContext
from holen.adapters.net.downloader import DefaultDownloader
from holen.adapters.shell.runner import DefaultRunner
from holen.adapters.system import DefaultSystem
from holen.core.config.loader import ConfigClient
from holen.core.config.manifest_loader import ManifestFinder
from holen.core.engine.resolver import load_strategy
from holen.core.models.utility import UtilityRequest

logger = logging.getLogger(__name__)


def default_context() -> StrategyContext:
    """Capabilities wired to the real machine."""
    runner = DefaultRunner()
    return StrategyContext(
        system=DefaultSystem(),
        config=ConfigClient.default(),
        downloader=DefaultDownloader(runner),
        runner=runner,
    )


def run_utility(
    name: str,
    args: list[str],
    version: str | None = None,
    context: StrategyContext | None = None,
    finder: ManifestFinder | None = None,
) -> None:
    """Run utility ``name`` with ``args``.

    Args:
        name: Utility name (usually the invoking binary's basename).
        args: Arguments forwarded unchanged to the utility.
        version: Pin a version instead of the manifest's first one.
        context: Capabilities to use (default: the real machine).
        finder: Manifest finder (default: from config).

    Raises:
        HolenError: any resolution or acquisition failure.
    """
    context = context or default_context()
    finder = finder or ManifestFinder.from_config(context.config, context.system)
    request = UtilityRequest(name=name, version=version)

    logger.debug("Running %s with args %s", request, args)
    manifest = finder.find(request)
    strategy = load_strategy(manifest, request, context)
    strategy.run(args)
