"""Loading of the generator directives document (generator.yml).

The document has a single top-level ``modules`` mapping; each module
block looks like::

    if_mib:
      walk: [sysUpTime, interfaces, ifXTable]
      lookups:
        - old_index: ifIndex
          new_index: ifDescr
      overrides:
        ifType:
          regex_extracts: {...}
      version: 2          # everything else is passed through as walk params
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping

import yaml

from mibgen.errors import ConfigError
from mibgen.models import LookupRule, MetricOverride, ModuleConfig

logger = logging.getLogger(__name__)

_DIRECTIVE_KEYS = {"walk", "lookups", "overrides"}


def _plain(value: Any) -> Any:
    """Copy nested mappings and sequences into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _parse_lookups(name: str, raw: Any) -> List[LookupRule]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'lookups' must be a list", name)
    rules = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError(f"lookup entry must be a mapping, got {entry!r}", name)
        old_index = entry.get("old_index")
        new_index = entry.get("new_index")
        if not old_index or not new_index:
            raise ConfigError("lookup entries need 'old_index' and 'new_index'", name)
        rules.append(LookupRule(old_index=str(old_index), new_index=str(new_index)))
    return rules


def _parse_overrides(name: str, raw: Any) -> Dict[str, MetricOverride]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'overrides' must be a mapping", name)
    overrides = {}
    for metric, params in raw.items():
        params = params or {}
        if not isinstance(params, dict):
            raise ConfigError(f"override for '{metric}' must be a mapping", name)
        extracts = params.get("regex_extracts") or {}
        if not isinstance(extracts, dict):
            raise ConfigError(f"regex_extracts for '{metric}' must be a mapping", name)
        overrides[str(metric)] = MetricOverride(regex_extracts=extracts)
    return overrides


def parse_module_config(name: str, raw: Any) -> ModuleConfig:
    """Validate one module block and build its :class:`ModuleConfig`.

    Raises:
        ConfigError: If the block doesn't have the expected shape.
    """
    raw = _plain(raw) if raw is not None else {}
    if not isinstance(raw, dict):
        raise ConfigError("module block must be a mapping", name)

    walk = raw.get("walk") or []
    if not isinstance(walk, list):
        raise ConfigError("'walk' must be a list", name)

    return ModuleConfig(
        walk=[str(w) for w in walk],
        lookups=_parse_lookups(name, raw.get("lookups")),
        overrides=_parse_overrides(name, raw.get("overrides")),
        walk_params={k: v for k, v in raw.items() if k not in _DIRECTIVE_KEYS},
    )


def parse_generator_config(document: Any) -> Dict[str, ModuleConfig]:
    """Build module configs from an already loaded directives mapping."""
    document = _plain(document) if document is not None else {}
    if not isinstance(document, dict):
        raise ConfigError("generator config must be a mapping")
    modules = document.get("modules")
    if not modules:
        raise ConfigError("generator config defines no modules")
    if not isinstance(modules, dict):
        raise ConfigError("'modules' must be a mapping")
    return {str(name): parse_module_config(str(name), block) for name, block in modules.items()}


def load_generator_config(config_path: str = "generator.yml") -> Dict[str, ModuleConfig]:
    """Read generator.yml and return its module configs.

    Values are taken as written: walk params reach the output unchanged.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigError: If it isn't valid YAML or its content is malformed.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Generator config {config_path} not found")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing {config_path}: {e}") from e
    modules = parse_generator_config(document)
    logger.info("Loaded %d module(s) from %s", len(modules), config_path)
    return modules
