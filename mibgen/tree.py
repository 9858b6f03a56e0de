"""
Object tree: the hierarchical model of every loaded MIB object.

Nodes exclusively own their children. Cross references between nodes
(AUGMENTS targets, index objects, lookup targets) are held as labels and
resolved through :class:`mibgen.name_index.NameIndex`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, cast

from mibgen.oid_utils import oid_str_to_tuple, oid_tuple_to_str
from mibgen.types import JsonDict


@dataclass
class Node:
    """A single MIB object (identifier, table, row, column or scalar)."""

    oid: str
    label: str
    type: str = ""
    access: str = ""
    description: str = ""
    hint: str = ""
    textual_convention: str = ""
    indexes: List[str] = field(default_factory=list)
    augments: str = ""
    fixed_size: int = 0
    children: List["Node"] = field(default_factory=list)

    def add_child(self, child: "Node") -> "Node":
        self.children.append(child)
        return child


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_from_dict(data: JsonDict) -> Node:
    """Build a node (and its subtree) from a JSON-style mapping.

    Only ``oid`` and ``label`` are required; every other field defaults.

    Raises:
        ValueError: If a node is missing its oid or label, or the oid
            is not dotted decimal.
    """
    oid = data.get("oid")
    label = data.get("label")
    if not oid or not label:
        raise ValueError(f"Tree node requires 'oid' and 'label': {data!r}")
    try:
        oid_tuple = oid_str_to_tuple(str(oid))
    except ValueError as e:
        raise ValueError(f"Tree node {label} has a malformed oid {oid!r}") from e
    children = [node_from_dict(c) for c in data.get("children", []) or []]
    return Node(
        oid=oid_tuple_to_str(oid_tuple),
        label=str(label),
        type=data.get("type") or "",
        access=data.get("access") or "",
        description=data.get("description") or "",
        hint=data.get("hint") or "",
        textual_convention=data.get("textual_convention") or "",
        indexes=[str(i) for i in data.get("indexes", []) or []],
        augments=data.get("augments") or "",
        fixed_size=int(data.get("fixed_size") or 0),
        children=children,
    )


def node_to_dict(node: Node) -> JsonDict:
    """Inverse of :func:`node_from_dict`; empty optional fields are omitted."""
    out: JsonDict = {"oid": node.oid, "label": node.label}
    for key in ("type", "access", "description", "hint", "textual_convention", "augments"):
        value = getattr(node, key)
        if value:
            out[key] = value
    if node.indexes:
        out["indexes"] = list(node.indexes)
    if node.fixed_size:
        out["fixed_size"] = node.fixed_size
    if node.children:
        out["children"] = [node_to_dict(c) for c in node.children]
    return out


def load_tree_json(path: str | Path) -> Node:
    """Load a tree previously written by :func:`write_tree_json`."""
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Tree file {path} must contain a JSON object")
    return node_from_dict(cast(Dict[str, Any], data))


def write_tree_json(path: str | Path, root: Node) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(node_to_dict(root), indent=2), encoding="utf-8")
