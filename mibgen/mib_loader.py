"""
Build the object tree from pysmi-compiled MIB modules.

Compiled modules are loaded through a pysnmp ``MibBuilder``. Every
OBJECT-TYPE / OBJECT IDENTIFIER symbol becomes a :class:`Node`; nodes
are linked under their nearest loaded OID ancestor, below a synthetic
``iso`` root when no module defines one.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, cast

from pyasn1.type import constraint
import pysnmp.smi.builder as _builder

from mibgen.oid_utils import oid_tuple_to_str
from mibgen.tree import Node
from mibgen.types import ProgressCallback

logger = logging.getLogger(__name__)

# pysnmp syntax class name -> type token, checked along the class MRO.
# Subclasses (Gauge32 < Unsigned32, IpAddress < OctetString) come first
# in any MRO, so the most specific application type wins.
SYNTAX_TYPE_TOKENS: Dict[str, str] = {
    "Counter64": "COUNTER64",
    "Counter32": "COUNTER",
    "Gauge32": "GAUGE",
    "Unsigned32": "UNSIGNED32",
    "TimeTicks": "TIMETICKS",
    "Integer32": "INTEGER32",
    "Integer": "INTEGER",
    "IpAddress": "IPADDR",
    "Bits": "BITSTRING",
    "Opaque": "OPAQUE",
    "OctetString": "OCTETSTR",
    "ObjectIdentifier": "OBJID",
    "Null": "NULL",
}


def _call_zero_arg(obj: object, name: str) -> Any:
    fn = getattr(obj, name, None)
    if not callable(fn):
        return None
    try:
        return fn()
    except TypeError:
        return None


def syntax_type_token(syntax: object) -> str:
    """Type token for a pysnmp syntax instance, "" if unknown."""
    if syntax is None:
        return ""
    for base in type(syntax).__mro__:
        token = SYNTAX_TYPE_TOKENS.get(base.__name__)
        if token:
            return token
    return ""


def textual_convention_name(syntax: object) -> str:
    """Name of the TEXTUAL-CONVENTION class ``syntax`` is built from."""
    if syntax is None:
        return ""
    cls = type(syntax)
    if any(base.__name__ == "TextualConvention" for base in cls.__mro__[1:]):
        return cls.__name__
    return ""


def display_hint(syntax: object) -> str:
    if syntax is None:
        return ""
    hint = _call_zero_arg(syntax, "getDisplayHint")
    if hint is None:
        hint = getattr(syntax, "displayHint", None)
    return hint.strip() if isinstance(hint, str) else ""


def _has_size_member(union: constraint.ConstraintsUnion) -> bool:
    return any(isinstance(m, constraint.ValueSizeConstraint) for m in union)


def effective_size_constraint(spec: object) -> Optional[constraint.AbstractConstraint]:
    """The size constraint that applies last in a pyasn1 constraint tree.

    Intersection members are applied in order, so the last member that
    constrains size wins. Returns a ``ValueSizeConstraint``, a
    ``ConstraintsUnion`` of sizes, or None.
    """
    if isinstance(spec, constraint.ValueSizeConstraint):
        return spec
    if isinstance(spec, constraint.ConstraintsUnion):
        return spec if _has_size_member(spec) else None
    if isinstance(spec, constraint.ConstraintsIntersection):
        for member in reversed(list(spec)):
            found = effective_size_constraint(member)
            if found is not None:
                return found
    return None


def fixed_size(syntax: object) -> int:
    """Fixed octet length of a string syntax, 0 if variable.

    pysmi wraps even a single SIZE in a ``ConstraintsUnion``; a union is
    fixed only when it has exactly one member, eg SIZE(6) but not
    SIZE(4|16).
    """
    if syntax is None:
        return 0
    fixed = getattr(syntax, "fixed_length", None)
    if isinstance(fixed, int) and fixed > 0:
        return fixed
    size = effective_size_constraint(getattr(syntax, "subtypeSpec", None))
    if isinstance(size, constraint.ConstraintsUnion):
        members = list(size)
        size = members[0] if len(members) == 1 else None
    if isinstance(size, constraint.ValueSizeConstraint) and size.start == size.stop:
        return int(size.start)
    return 0


def _index_labels(sym_obj: object) -> List[str]:
    names = _call_zero_arg(sym_obj, "getIndexNames") or ()
    labels = []
    for entry in names:
        # (implied, module name, symbol name)
        if isinstance(entry, tuple) and len(entry) == 3:
            labels.append(str(entry[2]))
    return labels


def _is_tree_symbol(sym_obj: object) -> bool:
    if inspect.isclass(sym_obj):
        return False
    name = _call_zero_arg(sym_obj, "getName")
    return isinstance(name, tuple) and len(name) > 0


class MibTreeLoader:
    """Loads compiled MIB modules and assembles them into one tree."""

    def __init__(
        self,
        compiled_dir: str | Path,
        mib_builder: Optional[Any] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        self.compiled_dir = Path(compiled_dir)
        self._mib_builder = mib_builder
        self._progress_callback = progress_callback

    def _get_builder(self) -> Any:
        if self._mib_builder is None:
            mib_builder = cast(Any, _builder.MibBuilder())
            mib_builder.loadTexts = True
            mib_builder.add_mib_sources(_builder.DirMibSource(str(self.compiled_dir)))
            self._mib_builder = mib_builder
        return self._mib_builder

    def discover_modules(self) -> List[str]:
        return sorted(
            p.stem for p in self.compiled_dir.glob("*.py") if p.name != "__init__.py"
        )

    def load_modules(self, modules: Optional[Sequence[str]] = None) -> None:
        """Load the named modules, or every compiled module in the directory.

        Raises:
            FileNotFoundError: If the compiled MIB directory doesn't exist.
        """
        if not self.compiled_dir.is_dir():
            raise FileNotFoundError(f"Compiled MIB directory {self.compiled_dir} not found")
        mib_builder = self._get_builder()
        names = list(modules) if modules else self.discover_modules()
        for name in names:
            if self._progress_callback:
                self._progress_callback(name)
            try:
                mib_builder.load_modules(name)
            except Exception as e:
                # A broken module only loses its own objects
                logger.warning("Failed to load MIB module %s: %s", name, e)

    def node_from_symbol(self, label: str, sym_obj: object) -> Node:
        syntax = _call_zero_arg(sym_obj, "getSyntax")
        access = _call_zero_arg(sym_obj, "getMaxAccess")
        description = _call_zero_arg(sym_obj, "getDescription")
        oid = cast(Tuple[int, ...], _call_zero_arg(sym_obj, "getName"))
        return Node(
            oid=oid_tuple_to_str(oid),
            label=label,
            type=syntax_type_token(syntax),
            access=access if isinstance(access, str) else "",
            description=description if isinstance(description, str) else "",
            hint=display_hint(syntax),
            textual_convention=textual_convention_name(syntax),
            indexes=_index_labels(sym_obj),
            fixed_size=fixed_size(syntax),
        )

    def collect_nodes(self) -> Dict[Tuple[int, ...], Node]:
        """Convert every loaded tree symbol into a node, keyed by OID."""
        mib_symbols = cast(
            Mapping[str, Mapping[str, object]], self._get_builder().mibSymbols
        )
        nodes: Dict[Tuple[int, ...], Node] = {}
        augments: Dict[str, str] = {}
        for mib_name, symbols in mib_symbols.items():
            for sym_name, sym_obj in symbols.items():
                if not _is_tree_symbol(sym_obj):
                    continue
                oid = cast(Tuple[int, ...], _call_zero_arg(sym_obj, "getName"))
                if oid in nodes:
                    continue
                nodes[oid] = self.node_from_symbol(sym_name, sym_obj)
                # The augmented row records who augments it
                for key in getattr(sym_obj, "augmentingRows", None) or {}:
                    if isinstance(key, tuple) and len(key) == 2:
                        augments[str(key[1])] = sym_name
        for node in nodes.values():
            if node.label in augments:
                node.augments = augments[node.label]
        return nodes

    @staticmethod
    def assemble(nodes: Dict[Tuple[int, ...], Node]) -> Node:
        """Link nodes under their nearest ancestor and return the root."""
        root = nodes.get((1,))
        if root is None:
            root = Node(oid="1", label="iso")
        for oid in sorted(nodes):
            if oid == (1,):
                continue
            parent = root
            for end in range(len(oid) - 1, 0, -1):
                candidate = nodes.get(oid[:end])
                if candidate is not None:
                    parent = candidate
                    break
            parent.add_child(nodes[oid])
        return root

    def load(self, modules: Optional[Sequence[str]] = None) -> Node:
        self.load_modules(modules)
        nodes = self.collect_nodes()
        logger.info("Loaded %d MIB objects from %s", len(nodes), self.compiled_dir)
        return self.assemble(nodes)


def load_mib_tree(
    compiled_dir: str | Path,
    modules: Optional[Sequence[str]] = None,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> Node:
    return MibTreeLoader(compiled_dir, progress_callback=progress_callback).load(modules)
