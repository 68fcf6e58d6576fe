"""
Tests for the docker and binary execution strategies.
"""

import pytest

from holen.adapters.base import StrategyContext
from holen.adapters.mock import MemDownloader, MemRunner, MemSystem
from holen.core.errors import DownloadFailed, ImagePullFailed, TemplateError
from holen.core.models.strategy import BinaryData, DockerData
from holen.core.strategies import BinaryStrategy, DockerStrategy


def _docker(context: StrategyContext, **overrides) -> DockerStrategy:
    fields = {"name": "jq", "version": "1.6", "image": "stedolan/jq:{{.Version}}"}
    fields.update(overrides)
    return DockerStrategy(context, DockerData(**fields))


def _binary(context: StrategyContext, **overrides) -> BinaryStrategy:
    fields = {
        "name": "jq",
        "version": "1.6",
        "base_url": "https://example.com/jq-{{.Version}}/jq-{{.MappedArch}}",
        "arch_map": {"linux_amd64": "linux64"},
    }
    fields.update(overrides)
    return BinaryStrategy(context, BinaryData(**fields))


# ── Docker ───────────────────────────────────────────────────────────


class TestDockerStrategy:
    def test_run_pulls_then_execs(
        self,
        context: StrategyContext,
        mem_downloader: MemDownloader,
        mem_runner: MemRunner,
    ):
        _docker(context).run(["-r", ".foo"])

        assert mem_downloader.pulls == ["stedolan/jq:1.6"]
        assert len(mem_runner.execs) == 1
        command, args, env = mem_runner.execs[0]
        assert command == "docker"
        assert args == ["run", "--rm", "--interactive", "stedolan/jq:1.6", "-r", ".foo"]
        assert env == {}

    def test_tty_when_terminal(self):
        system = MemSystem(terminal=True)
        runner = MemRunner()
        context = StrategyContext(
            system=system, config=None, downloader=MemDownloader(), runner=runner,
        )
        strategy = _docker(context)
        assert strategy.docker_args("img", []) == ["run", "--rm", "--interactive", "--tty", "img"]

    def test_not_interactive(self, context: StrategyContext):
        strategy = _docker(context, interactive=False)
        assert strategy.docker_args("img", ["x"]) == ["run", "--rm", "img", "x"]

    def test_mount_pwd(self, context: StrategyContext, mem_system: MemSystem):
        args = _docker(context, interactive=False, mount_pwd=True).docker_args("img", [])
        assert args == [
            "run", "--rm",
            "--volume", f"{mem_system.cwd()}:/cwd",
            "--workdir", "/cwd",
            "--user", "1000:1000",
            "img",
        ]

    def test_mount_pwd_no_user_off_linux(self):
        system = MemSystem(os_name="darwin", working_dir="/Users/me")
        context = StrategyContext(
            system=system, config=None, downloader=MemDownloader(), runner=MemRunner(),
        )
        args = _docker(context, interactive=False, mount_pwd=True).docker_args("img", [])
        assert "--user" not in args
        assert "/Users/me:/cwd" in args

    def test_docker_conn(self, context: StrategyContext):
        args = _docker(context, interactive=False, docker_conn=True).docker_args("img", [])
        assert args == [
            "run", "--rm",
            "--volume", "/var/run/docker.sock:/var/run/docker.sock",
            "img",
        ]

    def test_image_uses_mapped_arch(self, context: StrategyContext):
        strategy = _docker(
            context,
            image="org/tool:{{.Version}}-{{.MappedArch}}",
            arch_map={"linux_amd64": "x64"},
        )
        assert strategy.image() == "org/tool:1.6-x64"

    def test_pull_failure_aborts(self, mem_system: MemSystem, mem_runner: MemRunner):
        context = StrategyContext(
            system=mem_system,
            config=None,
            downloader=MemDownloader(fail=True),
            runner=mem_runner,
        )
        with pytest.raises(ImagePullFailed) as exc:
            _docker(context).run([])
        assert "stedolan/jq:1.6" in str(exc.value)
        assert mem_runner.execs == []

    def test_bad_template(self, context: StrategyContext, mem_downloader: MemDownloader):
        with pytest.raises(TemplateError):
            _docker(context, image="org/tool:{{.Nope}}").run([])
        assert mem_downloader.pulls == []


# ── Binary ───────────────────────────────────────────────────────────


class TestBinaryStrategy:
    def test_url(self, context: StrategyContext):
        assert _binary(context).url() == "https://example.com/jq-1.6/jq-linux64"

    def test_artifact_path(self, context: StrategyContext, mem_system: MemSystem):
        assert _binary(context).artifact_path() == mem_system.data_path() / "bin" / "jq--1.6"

    def test_run_downloads_and_execs(
        self,
        context: StrategyContext,
        mem_system: MemSystem,
        mem_downloader: MemDownloader,
        mem_runner: MemRunner,
    ):
        strategy = _binary(context)
        local = str(strategy.artifact_path())

        strategy.run(["--version"])

        assert mem_downloader.downloads == [("https://example.com/jq-1.6/jq-linux64", local)]
        assert mem_system.executables == [local]
        assert mem_runner.execs == [(local, ["--version"], {})]

    def test_existing_artifact_not_downloaded(
        self,
        context: StrategyContext,
        mem_system: MemSystem,
        mem_downloader: MemDownloader,
        mem_runner: MemRunner,
    ):
        strategy = _binary(context)
        local = str(strategy.artifact_path())
        mem_system.files[local] = True

        strategy.run([])

        assert mem_downloader.downloads == []
        assert mem_runner.execs == [(local, [], {})]

    def test_download_failure(self, mem_system: MemSystem, mem_runner: MemRunner):
        context = StrategyContext(
            system=mem_system,
            config=None,
            downloader=MemDownloader(fail=True),
            runner=mem_runner,
        )
        with pytest.raises(DownloadFailed) as exc:
            _binary(context).run([])
        assert "example.com" in str(exc.value)
        assert mem_runner.execs == []

    def test_missing_arch_entry_leaves_blank(self, context: StrategyContext):
        strategy = _binary(context, arch_map={})
        assert strategy.url() == "https://example.com/jq-1.6/jq-"

    def test_bad_template(self, context: StrategyContext):
        with pytest.raises(TemplateError):
            _binary(context, base_url="https://example.com/{{.Version").url()
