"""
Module generator: turns one module's directives into exporter config.

Works on a tree already prepared by :func:`mibgen.normalizer.prepare_tree`
and only reads it, so modules are independent of each other.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Set

from mibgen.classifier import metric_access, metric_type
from mibgen.diagnostics import UNKNOWN_INDEX, UNSUPPORTED_INDEX_TYPE, Diagnostics
from mibgen.errors import (
    UnknownLookupIndexError,
    UnknownWalkTargetError,
    UnsupportedLookupTypeError,
)
from mibgen.labels import sanitize_label_name
from mibgen.models import Index, Lookup, Metric, Module, ModuleConfig
from mibgen.name_index import NameIndex
from mibgen.oid_utils import minimize_oids
from mibgen.tree import Node, iter_nodes

logger = logging.getLogger(__name__)


def resolve_walk(walk: List[str], index: NameIndex) -> List[str]:
    """Resolve walk entries (OIDs or labels) and drop redundant subtrees.

    Raises:
        UnknownWalkTargetError: If any entry is not in the index.
    """
    to_walk = []
    for name in walk:
        oid = index.resolve_oid(name)
        if oid is None:
            raise UnknownWalkTargetError(name)
        to_walk.append(oid)
    return minimize_oids(to_walk)


def build_metric(
    node: Node, index: NameIndex, diagnostics: Diagnostics
) -> Optional[Metric]:
    """Build the metric for ``node``, or None if it can't be exposed.

    Unsupported types and inaccessible nodes are skipped silently. A
    metric whose index schema can't be completed is dropped with a
    diagnostic.
    """
    kind, ok = metric_type(node.type)
    if not ok:
        return None
    if not metric_access(node.access):
        return None

    metric = Metric(
        name=sanitize_label_name(node.label),
        oid=node.oid,
        type=kind,
        help=f"{node.description} - {node.oid}",
    )
    for label in node.indexes:
        index_node = index.get(label)
        if index_node is None:
            diagnostics.warn(
                UNKNOWN_INDEX,
                node.label,
                f"Error, can't find index {label} for node {node.label}",
            )
            return None
        index_type, ok = metric_type(index_node.type)
        if not ok:
            diagnostics.warn(
                UNSUPPORTED_INDEX_TYPE,
                node.label,
                f"Error, can't handle index type {index_node.type} for node {node.label}",
            )
            return None
        metric.indexes.append(
            Index(labelname=label, type=index_type, fixed_size=index_node.fixed_size)
        )
    return metric


def apply_lookups(
    cfg: ModuleConfig, metrics: List[Metric], index: NameIndex, need_to_walk: Set[str]
) -> None:
    """Swap indexes for looked-up values, in rule order.

    Raises:
        UnknownLookupIndexError: If a matched rule's new_index is unknown.
        UnsupportedLookupTypeError: If its node has no metric type.
    """
    for rule in cfg.lookups:
        for metric in metrics:
            for idx in metric.indexes:
                if idx.labelname != rule.old_index:
                    continue
                index_node = index.get(rule.new_index)
                if index_node is None:
                    raise UnknownLookupIndexError(rule.new_index)
                lookup_type, ok = metric_type(index_node.type)
                if not ok:
                    raise UnsupportedLookupTypeError(rule.new_index, index_node.type)
                # Avoid leaving the old labelname around.
                labelname = sanitize_label_name(index_node.label)
                idx.labelname = labelname
                metric.lookups.append(
                    Lookup(
                        labels=[labelname],
                        labelname=labelname,
                        oid=index_node.oid,
                        type=lookup_type,
                    )
                )
                need_to_walk.add(index_node.oid)


def apply_overrides(cfg: ModuleConfig, metrics: List[Metric]) -> None:
    for name, override in cfg.overrides.items():
        matched = False
        for metric in metrics:
            if name == metric.name or name == metric.oid:
                metric.regex_extracts = override.regex_extracts
                matched = True
        if not matched:
            logger.debug("Override %s matches no generated metric", name)


def generate_config_module(
    cfg: ModuleConfig, index: NameIndex, diagnostics: Optional[Diagnostics] = None
) -> Module:
    """Generate the exporter config for one module.

    Args:
        cfg: The module's directives.
        index: Name index of a prepared tree.
        diagnostics: Collector for non-fatal problems; a fresh one is
            used when omitted.

    Returns:
        The module with metrics in discovery order and a minimized walk.

    Raises:
        GeneratorError: On an unresolvable walk or lookup directive.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    out = Module(walk_params=dict(cfg.walk_params))
    need_to_walk: Set[str] = set()

    for oid in resolve_walk(cfg.walk, index):
        root = index[oid]
        need_to_walk.add(root.oid)
        for node in iter_nodes(root):
            metric = build_metric(node, index, diagnostics)
            if metric is not None:
                out.metrics.append(metric)

    apply_lookups(cfg, out.metrics, index, need_to_walk)
    apply_overrides(cfg, out.metrics)

    out.walk = minimize_oids(need_to_walk)
    return out


def generate_config(
    modules: Mapping[str, ModuleConfig],
    index: NameIndex,
    diagnostics: Optional[Diagnostics] = None,
) -> Dict[str, Module]:
    """Generate every configured module, in directive order.

    Any fatal directive error aborts the whole run; no partial result
    is returned.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    output: Dict[str, Module] = {}
    for name, cfg in modules.items():
        logger.info("Generating config for module %s", name)
        output[name] = generate_config_module(cfg, index, diagnostics)
        logger.info("Generated %d metrics for module %s", len(output[name].metrics), name)
    return output
