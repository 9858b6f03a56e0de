"""Directive (input) and exporter config (output) models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from mibgen.types import RegexExtracts, WalkParams


@dataclass(frozen=True)
class LookupRule:
    """Replace index ``old_index`` by the value walked at ``new_index``."""

    old_index: str
    new_index: str


@dataclass
class MetricOverride:
    regex_extracts: RegexExtracts = field(default_factory=dict)


@dataclass
class ModuleConfig:
    """Directives for one generated module."""

    walk: List[str] = field(default_factory=list)
    lookups: List[LookupRule] = field(default_factory=list)
    overrides: Dict[str, MetricOverride] = field(default_factory=dict)
    walk_params: WalkParams = field(default_factory=dict)


@dataclass
class Index:
    labelname: str
    type: str
    fixed_size: int = 0


@dataclass
class Lookup:
    labels: List[str]
    labelname: str
    oid: str
    type: str


@dataclass
class Metric:
    name: str
    oid: str
    type: str
    help: str
    indexes: List[Index] = field(default_factory=list)
    lookups: List[Lookup] = field(default_factory=list)
    regex_extracts: RegexExtracts = field(default_factory=dict)


@dataclass
class Module:
    walk: List[str] = field(default_factory=list)
    metrics: List[Metric] = field(default_factory=list)
    walk_params: WalkParams = field(default_factory=dict)
