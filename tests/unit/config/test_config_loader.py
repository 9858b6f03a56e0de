from pathlib import Path
from typing import Any, Dict

import pytest

from mibgen.config_loader import (
    load_generator_config,
    parse_generator_config,
    parse_module_config,
)
from mibgen.errors import ConfigError
from mibgen.models import LookupRule, MetricOverride, ModuleConfig

GENERATOR_YML = """
modules:
  if_mib:
    walk: [sysUpTime, interfaces, 1.3.6.1.2.1.31.1.1]
    lookups:
      - old_index: ifIndex
        new_index: ifDescr
    overrides:
      ifType:
        regex_extracts:
          Up:
            - regex: '^1$'
              value: '1'
    version: 2
    max_repetitions: 25
    timeout: 10s
  system:
    walk:
      - system
"""


def test_load_generator_config(tmp_path: Path) -> None:
    path = tmp_path / "generator.yml"
    path.write_text(GENERATOR_YML)

    modules = load_generator_config(str(path))

    assert list(modules) == ["if_mib", "system"]
    if_mib = modules["if_mib"]
    assert if_mib.walk == ["sysUpTime", "interfaces", "1.3.6.1.2.1.31.1.1"]
    assert if_mib.lookups == [LookupRule(old_index="ifIndex", new_index="ifDescr")]
    assert if_mib.overrides == {
        "ifType": MetricOverride(regex_extracts={"Up": [{"regex": "^1$", "value": "1"}]})
    }
    assert if_mib.walk_params == {"version": 2, "max_repetitions": 25, "timeout": "10s"}
    assert modules["system"] == ModuleConfig(walk=["system"])


def test_load_generator_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_generator_config(str(tmp_path / "nope.yml"))


def test_load_generator_config_without_modules(tmp_path: Path) -> None:
    path = tmp_path / "generator.yml"
    path.write_text("other: 1\n")
    with pytest.raises(ConfigError, match="no modules"):
        load_generator_config(str(path))


def test_walk_params_are_taken_literally(tmp_path: Path) -> None:
    path = tmp_path / "generator.yml"
    path.write_text(
        "modules:\n"
        "  m:\n"
        "    walk: [system]\n"
        "    auth:\n"
        "      community: '@int 12'\n"
        "      password: '@format {env[HOME]}'\n"
    )
    modules = load_generator_config(str(path))
    assert modules["m"].walk_params == {
        "auth": {"community": "@int 12", "password": "@format {env[HOME]}"}
    }


def test_environment_does_not_change_modules(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DYNACONF_MODULES", '@json {"other": {"walk": ["ifTable"]}}')
    monkeypatch.setenv("MIBGEN_MODULES", '@json {"other": {"walk": ["ifTable"]}}')
    path = tmp_path / "generator.yml"
    path.write_text("modules:\n  m:\n    walk: [system]\n")
    assert list(load_generator_config(str(path))) == ["m"]


def test_load_generator_config_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "generator.yml"
    path.write_text("modules:\n  m: {walk: [system\n")
    with pytest.raises(ConfigError, match="Error parsing"):
        load_generator_config(str(path))


class TestParseModuleConfig:
    def test_empty_block(self) -> None:
        assert parse_module_config("m", None) == ModuleConfig()

    def test_walk_must_be_list(self) -> None:
        with pytest.raises(ConfigError, match="module 'm': 'walk' must be a list"):
            parse_module_config("m", {"walk": "system"})

    def test_block_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError):
            parse_module_config("m", ["system"])

    @pytest.mark.parametrize(
        "lookups",
        [
            {"old_index": "a", "new_index": "b"},
            ["ifIndex"],
            [{"old_index": "ifIndex"}],
            [{"new_index": "ifDescr"}],
        ],
    )
    def test_bad_lookups(self, lookups: Any) -> None:
        with pytest.raises(ConfigError):
            parse_module_config("m", {"walk": ["x"], "lookups": lookups})

    @pytest.mark.parametrize(
        "overrides",
        [["ifType"], {"ifType": "x"}, {"ifType": {"regex_extracts": ["x"]}}],
    )
    def test_bad_overrides(self, overrides: Any) -> None:
        with pytest.raises(ConfigError):
            parse_module_config("m", {"walk": ["x"], "overrides": overrides})

    def test_override_without_extracts(self) -> None:
        cfg = parse_module_config("m", {"walk": ["x"], "overrides": {"ifType": None}})
        assert cfg.overrides == {"ifType": MetricOverride()}

    def test_walk_entries_become_strings(self) -> None:
        cfg = parse_module_config("m", {"walk": [1.3, "system"]})
        assert cfg.walk == ["1.3", "system"]

    def test_auth_is_a_walk_param(self) -> None:
        raw: Dict[str, Any] = {"walk": ["system"], "auth": {"community": "public"}}
        cfg = parse_module_config("m", raw)
        assert cfg.walk_params == {"auth": {"community": "public"}}


def test_parse_generator_config_rejects_non_mapping_modules() -> None:
    with pytest.raises(ConfigError):
        parse_generator_config({"modules": ["a", "b"]})


def test_parse_generator_config_rejects_non_mapping_document() -> None:
    with pytest.raises(ConfigError):
        parse_generator_config("modules")
