"""Name index: OID strings and labels mapped to their tree nodes."""

from __future__ import annotations

from typing import Dict, Iterator, Optional

from mibgen.tree import Node, iter_nodes


class NameIndex:
    """Lookup from OID string or label to the owning node.

    Built once from a tree root. Entries always point at nodes of that
    tree; the index holds no node of its own.
    """

    def __init__(self, root: Node) -> None:
        self.root = root
        self._by_name: Dict[str, Node] = {}
        for node in iter_nodes(root):
            self._by_name[node.oid] = node
            self._by_name[node.label] = node

    def get(self, name: str) -> Optional[Node]:
        return self._by_name.get(name)

    def resolve_oid(self, name: str) -> Optional[str]:
        """Return the canonical OID for an OID or label, or None."""
        node = self._by_name.get(name)
        return node.oid if node is not None else None

    def __getitem__(self, name: str) -> Node:
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)
