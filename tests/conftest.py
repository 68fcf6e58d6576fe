"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from holen.adapters.base import StrategyContext
from holen.adapters.mock import MemConfig, MemDownloader, MemRunner, MemSystem


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo any setup_logging() a test (or the CLI under test) performed."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def mem_system(tmp_path: Path) -> MemSystem:
    """A linux/amd64 machine whose data dir lives in tmp_path."""
    return MemSystem(data_dir=tmp_path / "data", working_dir=tmp_path / "work")


@pytest.fixture
def mem_runner() -> MemRunner:
    return MemRunner()


@pytest.fixture
def mem_downloader() -> MemDownloader:
    return MemDownloader()


@pytest.fixture
def mem_config() -> MemConfig:
    return MemConfig()


@pytest.fixture
def context(
    mem_system: MemSystem,
    mem_config: MemConfig,
    mem_downloader: MemDownloader,
    mem_runner: MemRunner,
) -> StrategyContext:
    """Strategy context wired entirely to in-memory doubles."""
    return StrategyContext(
        system=mem_system,
        config=mem_config,
        downloader=mem_downloader,
        runner=mem_runner,
    )


@pytest.fixture
def manifests_dir(tmp_path: Path) -> Path:
    """A directory holding a jq manifest with docker and binary strategies."""
    directory = tmp_path / "manifests"
    directory.mkdir()
    (directory / "jq.yaml").write_text(textwrap.dedent("""\
        name: jq
        strategies:
          docker:
            image: "stedolan/jq:{{.Version}}"
            versions:
              - version: "1.6"
              - version: "1.5"
                image: "old/jq:{{.Version}}"
          binary:
            base_url: "https://example.com/jq-{{.Version}}/jq-{{.MappedArch}}"
            arch_map:
              linux_amd64: linux64
              darwin_amd64: osx-amd64
            versions:
              - version: "1.6"
    """))
    return directory
