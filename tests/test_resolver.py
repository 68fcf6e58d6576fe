"""
Tests for the strategy resolver — priority, version selection, merge, typing.
"""

import pytest

from holen.adapters.base import StrategyContext
from holen.adapters.mock import MemConfig
from holen.core.engine.resolver import (
    DEFAULT_PRIORITY,
    build_strategy,
    extract_arch_map,
    load_strategy,
    merge_strategy,
    select_strategy,
    select_version,
    strategy_priority,
)
from holen.core.errors import (
    ConfigIOFailed,
    ManifestLoadFailed,
    MissingRequiredField,
    NoStrategyFound,
    VersionNotFound,
)
from holen.core.models.manifest import ManifestData, StrategyBlock
from holen.core.models.strategy import StrategyKind
from holen.core.models.utility import UtilityRequest
from holen.core.strategies import BinaryStrategy, DockerStrategy


def _manifest(**strategies) -> ManifestData:
    return ManifestData.model_validate({"name": "tool", "strategies": strategies})


DOCKER_BLOCK = {
    "image": "org/tool:{{.Version}}",
    "mount_pwd": True,
    "versions": [
        {"version": "2.0"},
        {"version": "1.0", "image": "legacy/tool:{{.Version}}", "mount_pwd": False},
    ],
}

BINARY_BLOCK = {
    "base_url": "https://example.com/{{.Version}}/tool-{{.MappedArch}}",
    "arch_map": {"linux_amd64": "linux64"},
    "versions": [{"version": "2.0"}],
}


class _FailingConfig(MemConfig):
    def get(self, key: str) -> str:
        raise ConfigIOFailed("unreadable")


# ── Priority ─────────────────────────────────────────────────────────


class TestStrategyPriority:
    def test_default_when_unset(self):
        assert strategy_priority(MemConfig()) == DEFAULT_PRIORITY.split(",")

    def test_default_when_empty(self):
        assert strategy_priority(MemConfig({"strategy.priority": ""})) == ["docker", "binary"]

    def test_configured_order(self):
        config = MemConfig({"strategy.priority": "binary,docker"})
        assert strategy_priority(config) == ["binary", "docker"]

    def test_whitespace_and_blanks_ignored(self):
        config = MemConfig({"strategy.priority": " binary , ,docker "})
        assert strategy_priority(config) == ["binary", "docker"]

    def test_unreadable_config_uses_default(self):
        assert strategy_priority(_FailingConfig()) == ["docker", "binary"]


# ── Kind selection ───────────────────────────────────────────────────


class TestSelectStrategy:
    def test_first_present_wins(self):
        manifest = _manifest(docker=DOCKER_BLOCK, binary=BINARY_BLOCK)
        kind, _block = select_strategy(manifest, ["docker", "binary"])
        assert kind is StrategyKind.DOCKER

    def test_priority_order_respected(self):
        manifest = _manifest(docker=DOCKER_BLOCK, binary=BINARY_BLOCK)
        kind, _block = select_strategy(manifest, ["binary", "docker"])
        assert kind is StrategyKind.BINARY

    def test_fallback_to_later_entry(self):
        manifest = _manifest(binary=BINARY_BLOCK)
        kind, block = select_strategy(manifest, ["docker", "binary"])
        assert kind is StrategyKind.BINARY
        assert block.versions[0].version == "2.0"

    def test_none_present(self):
        manifest = _manifest(binary=BINARY_BLOCK)
        with pytest.raises(NoStrategyFound) as exc:
            select_strategy(manifest, ["docker"])
        assert "docker" in str(exc.value)
        assert exc.value.priority == ["docker"]

    def test_unsupported_kind_is_skipped(self):
        manifest = _manifest(git={"versions": [{"version": "1"}]}, binary=BINARY_BLOCK)
        kind, _block = select_strategy(manifest, ["git", "binary"])
        assert kind is StrategyKind.BINARY

    def test_only_unsupported_kind(self):
        manifest = _manifest(git={"versions": [{"version": "1"}]})
        with pytest.raises(NoStrategyFound):
            select_strategy(manifest, ["git"])


# ── Version selection ────────────────────────────────────────────────


class TestSelectVersion:
    def _block(self) -> StrategyBlock:
        return StrategyBlock.model_validate(DOCKER_BLOCK)

    def test_first_when_unrequested(self):
        assert select_version(self._block(), StrategyKind.DOCKER).version == "2.0"

    def test_exact_match(self):
        record = select_version(self._block(), StrategyKind.DOCKER, "1.0")
        assert record.version == "1.0"

    def test_no_prefix_match(self):
        with pytest.raises(VersionNotFound):
            select_version(self._block(), StrategyKind.DOCKER, "1")

    def test_missing_version_lists_request(self):
        with pytest.raises(VersionNotFound) as exc:
            select_version(self._block(), StrategyKind.DOCKER, "1.2")
        assert "1.2" in str(exc.value)
        assert exc.value.known == ["2.0", "1.0"]

    def test_empty_versions(self):
        block = StrategyBlock.model_validate({"image": "x", "versions": []})
        with pytest.raises(VersionNotFound):
            select_version(block, StrategyKind.DOCKER)

    def test_numeric_version_coerced(self):
        block = StrategyBlock.model_validate({"image": "x", "versions": [{"version": 1.6}]})
        assert select_version(block, StrategyKind.DOCKER, "1.6").version == "1.6"


# ── Merge ────────────────────────────────────────────────────────────


class TestMergeStrategy:
    def test_record_wins_defaults_fill(self):
        defaults = {"image": "a", "mount_pwd": True, "docker_conn": True}
        record = {"version": "1", "image": "b", "mount_pwd": False}
        merged = merge_strategy(defaults, record)
        for key in ("version", "image", "mount_pwd", "docker_conn"):
            expected = record[key] if key in record else defaults[key]
            assert merged[key] == expected

    def test_versions_never_carried(self):
        merged = merge_strategy({"versions": [1], "image": "a"}, {"version": "1"})
        assert "versions" not in merged

    def test_inputs_not_mutated(self):
        defaults = {"image": "a"}
        record = {"version": "1", "image": "b"}
        merge_strategy(defaults, record)
        assert defaults == {"image": "a"}
        assert record == {"version": "1", "image": "b"}

    def test_idempotent(self):
        defaults = {"image": "a", "arch_map": {"linux_amd64": "x"}}
        record = {"version": "1", "mount_pwd": True}
        assert merge_strategy(defaults, record) == merge_strategy(defaults, record)

    def test_arch_map_replaced_wholesale(self):
        defaults = {"arch_map": {"linux_amd64": "linux64", "darwin_amd64": "osx"}}
        record = {"version": "1", "arch_map": {"linux_arm64": "arm"}}
        merged = merge_strategy(defaults, record)
        assert merged["arch_map"] == {"linux_arm64": "arm"}


class TestExtractArchMap:
    def test_absent(self):
        assert extract_arch_map({}) == {}

    def test_values_stringified(self):
        assert extract_arch_map({"arch_map": {"linux_386": 386}}) == {"linux_386": "386"}

    def test_not_a_mapping(self):
        with pytest.raises(ManifestLoadFailed):
            extract_arch_map({"arch_map": ["linux64"]})


# ── Typing ───────────────────────────────────────────────────────────


class TestBuildStrategy:
    def test_docker_defaults(self, context: StrategyContext):
        strategy = build_strategy(
            StrategyKind.DOCKER, "tool", {"version": "1", "image": "org/tool"}, context
        )
        assert isinstance(strategy, DockerStrategy)
        assert strategy.data.interactive is True
        assert strategy.data.mount_pwd is False
        assert strategy.data.docker_conn is False
        assert strategy.data.arch_map == {}

    def test_docker_interactive_false(self, context: StrategyContext):
        strategy = build_strategy(
            StrategyKind.DOCKER,
            "tool",
            {"version": "1", "image": "org/tool", "interactive": False},
            context,
        )
        assert strategy.data.interactive is False

    def test_docker_requires_image(self, context: StrategyContext):
        with pytest.raises(MissingRequiredField) as exc:
            build_strategy(StrategyKind.DOCKER, "tool", {"version": "1"}, context)
        assert exc.value.field == "image"
        assert exc.value.kind == "docker"

    def test_binary_requires_base_url(self, context: StrategyContext):
        with pytest.raises(MissingRequiredField) as exc:
            build_strategy(StrategyKind.BINARY, "tool", {"version": "1"}, context)
        assert exc.value.field == "base_url"

    def test_wrong_type_rejected(self, context: StrategyContext):
        with pytest.raises(ManifestLoadFailed):
            build_strategy(
                StrategyKind.DOCKER,
                "tool",
                {"version": "1", "image": "x", "mount_pwd": {"nested": True}},
                context,
            )

    def test_binary_strategy(self, context: StrategyContext):
        merged = {"version": "2.0", **{k: v for k, v in BINARY_BLOCK.items() if k != "versions"}}
        strategy = build_strategy(StrategyKind.BINARY, "tool", merged, context)
        assert isinstance(strategy, BinaryStrategy)
        assert strategy.data.arch_map == {"linux_amd64": "linux64"}
        assert strategy.data.name == "tool"


# ── End-to-end resolution ────────────────────────────────────────────


class TestLoadStrategy:
    def test_docker_selected_by_default(self, context: StrategyContext):
        manifest = _manifest(docker=DOCKER_BLOCK, binary=BINARY_BLOCK)
        strategy = load_strategy(manifest, UtilityRequest(name="tool"), context)
        assert isinstance(strategy, DockerStrategy)
        assert strategy.data.version == "2.0"
        assert strategy.data.image == "org/tool:{{.Version}}"
        assert strategy.data.mount_pwd is True

    def test_version_override_applied(self, context: StrategyContext):
        manifest = _manifest(docker=DOCKER_BLOCK)
        strategy = load_strategy(manifest, UtilityRequest(name="tool", version="1.0"), context)
        assert strategy.data.image == "legacy/tool:{{.Version}}"
        assert strategy.data.mount_pwd is False

    def test_configured_priority(self, context: StrategyContext, mem_config: MemConfig):
        mem_config.values["strategy.priority"] = "binary,docker"
        manifest = _manifest(docker=DOCKER_BLOCK, binary=BINARY_BLOCK)
        strategy = load_strategy(manifest, UtilityRequest(name="tool"), context)
        assert isinstance(strategy, BinaryStrategy)

    def test_version_not_found(self, context: StrategyContext):
        manifest = _manifest(docker=DOCKER_BLOCK, binary=BINARY_BLOCK)
        with pytest.raises(VersionNotFound) as exc:
            load_strategy(manifest, UtilityRequest(name="tool", version="1.2"), context)
        assert "1.2" in str(exc.value)

    def test_no_strategy(self, context: StrategyContext, mem_config: MemConfig):
        mem_config.values["strategy.priority"] = "docker"
        manifest = _manifest(binary=BINARY_BLOCK)
        with pytest.raises(NoStrategyFound):
            load_strategy(manifest, UtilityRequest(name="tool"), context)

    def test_repeat_resolution_is_stable(self, context: StrategyContext):
        manifest = _manifest(docker=DOCKER_BLOCK)
        request = UtilityRequest(name="tool", version="1.0")
        first = load_strategy(manifest, request, context)
        second = load_strategy(manifest, request, context)
        assert first.data == second.data
        assert manifest.strategies["docker"].defaults["image"] == "org/tool:{{.Version}}"
