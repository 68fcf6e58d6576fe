"""
Binary strategy — download a release binary once and exec it.

Artifacts live at ``<data_path>/bin/<name>--<version>``. An existing
artifact is reused; the downloader only ever moves a complete file
into that path, so whatever is there is whole.
"""

from __future__ import annotations

import logging
from pathlib import Path

from holen.adapters.base import StrategyContext
from holen.core.engine.templater import expand
from holen.core.errors import DownloadFailed, HolenError, TemplateError
from holen.core.models.strategy import BinaryData, StrategyKind
from holen.core.strategies.base import Strategy

logger = logging.getLogger(__name__)


class BinaryStrategy(Strategy):
    kind = StrategyKind.BINARY

    def __init__(self, context: StrategyContext, data: BinaryData):
        super().__init__(context)
        self._data = data

    @property
    def data(self) -> BinaryData:
        return self._data

    def url(self) -> str:
        temp = self.template_context(self._data.version, self._data.arch_map)
        logger.debug("templater: %r", temp)
        try:
            return expand(temp, self._data.base_url)
        except TemplateError as e:
            raise TemplateError(f"unable to template url: {e}") from e

    def artifact_path(self) -> Path:
        return (
            self.context.system.data_path()
            / "bin"
            / f"{self._data.name}--{self._data.version}"
        )

    def run(self, args: list[str]) -> None:
        system = self.context.system
        url = self.url()
        local_path = self.artifact_path()

        if system.file_exists(local_path):
            logger.debug("Using cached binary %s", local_path)
        else:
            try:
                self.context.downloader.download_file(url, local_path)
            except (HolenError, OSError) as e:
                raise DownloadFailed(f"can't download binary from {url}: {e}") from e

        try:
            system.make_executable(local_path)
        except OSError as e:
            raise DownloadFailed(f"can't make {local_path} executable: {e}") from e

        logger.info("Running %s %s from %s", self._data.name, self._data.version, local_path)
        self.context.runner.exec_command(str(local_path), args)
