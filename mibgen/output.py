"""Serialization of generated modules into the exporter's YAML config."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from mibgen.errors import GeneratorError
from mibgen.models import Index, Lookup, Metric, Module
from mibgen.types import JsonDict

logger = logging.getLogger(__name__)


class OutputValidationError(GeneratorError):
    """Raised when the rendered config does not read back as expected."""


def index_to_dict(index: Index) -> JsonDict:
    out: JsonDict = {"labelname": index.labelname, "type": index.type}
    if index.fixed_size:
        out["fixed_size"] = index.fixed_size
    return out


def lookup_to_dict(lookup: Lookup) -> JsonDict:
    return {
        "labels": list(lookup.labels),
        "labelname": lookup.labelname,
        "oid": lookup.oid,
        "type": lookup.type,
    }


def metric_to_dict(metric: Metric) -> JsonDict:
    out: JsonDict = {
        "name": metric.name,
        "oid": metric.oid,
        "type": metric.type,
        "help": metric.help,
    }
    if metric.indexes:
        out["indexes"] = [index_to_dict(i) for i in metric.indexes]
    if metric.lookups:
        out["lookups"] = [lookup_to_dict(lk) for lk in metric.lookups]
    if metric.regex_extracts:
        out["regex_extracts"] = metric.regex_extracts
    return out


def module_to_dict(module: Module) -> JsonDict:
    """Walk params are inlined next to ``walk`` and ``metrics``."""
    out: JsonDict = {"walk": list(module.walk)}
    for key, value in module.walk_params.items():
        if key not in ("walk", "metrics"):
            out[key] = value
    out["metrics"] = [metric_to_dict(m) for m in module.metrics]
    return out


def config_to_dict(modules: Mapping[str, Module]) -> Dict[str, JsonDict]:
    return {name: module_to_dict(module) for name, module in modules.items()}


def dumps_config(modules: Mapping[str, Module]) -> str:
    return yaml.safe_dump(
        config_to_dict(modules),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def validate_rendered(rendered: str, modules: Mapping[str, Module]) -> None:
    """Parse the rendered config back and check it matches ``modules``.

    Raises:
        OutputValidationError: If the document doesn't round-trip.
    """
    try:
        parsed: Any = yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise OutputValidationError(f"Error parsing generated config: {e}") from e

    if not modules:
        if parsed not in (None, {}):
            raise OutputValidationError("Generated config should be empty")
        return
    if not isinstance(parsed, dict) or set(parsed) != set(modules):
        raise OutputValidationError("Generated config has unexpected modules")
    for name, module in modules.items():
        block = parsed[name]
        if not isinstance(block, dict):
            raise OutputValidationError(f"Module {name} is not a mapping")
        if block.get("walk") != module.walk:
            raise OutputValidationError(f"Module {name} walk list changed on reload")
        if len(block.get("metrics") or []) != len(module.metrics):
            raise OutputValidationError(f"Module {name} metric count changed on reload")


def write_config(output_path: str | Path, modules: Mapping[str, Module]) -> Path:
    """Render, check and write the config. Returns the absolute path."""
    destination = Path(output_path).resolve()
    rendered = dumps_config(modules)
    validate_rendered(rendered, modules)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(rendered, encoding="utf-8")
    logger.info("Config written to %s", destination)
    return destination
