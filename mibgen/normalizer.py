"""
Tree normalizer: ordered passes that repair and enrich node metadata.

Each pass walks the whole tree and finishes before the next one starts.
Later passes read fields rewritten by earlier ones (augmentation copies
already corrected self-indexes, for instance), so ``PASSES`` order is
part of the contract.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Tuple

from mibgen.classifier import DISPLAY_STRING, PHYS_ADDRESS48
from mibgen.diagnostics import UNKNOWN_AUGMENTS, Diagnostics
from mibgen.name_index import NameIndex
from mibgen.tree import Node, iter_nodes

logger = logging.getLogger(__name__)

TreePass = Callable[[Node, NameIndex, Diagnostics], None]

# RFC 2579 display hints rendering octets as ASCII ("a") or UTF-8 ("t").
# Both end up as DisplayString even though DisplayString is ASCII only.
_DISPLAY_STRING_HINT_RE = re.compile(r"\d+[at]")
_MAC_ADDRESS_HINT = "1x:"


def trim_description(description: str) -> str:
    """Collapse whitespace and keep only the first sentence."""
    collapsed = " ".join(description.split())
    return collapsed.split(". ")[0]


def trim_descriptions(root: Node, index: NameIndex, diagnostics: Diagnostics) -> None:
    for node in iter_nodes(root):
        node.description = trim_description(node.description)


def fix_self_indexes(root: Node, index: NameIndex, diagnostics: Diagnostics) -> None:
    """Rows indexed by a bare INTEGER are indexed by the row itself.

    Example: snSlotsEntry in LANOPTICS-HUB-MIB.
    """
    for node in iter_nodes(root):
        node.indexes = [node.label if i == "INTEGER" else i for i in node.indexes]


def propagate_augments(root: Node, index: NameIndex, diagnostics: Diagnostics) -> None:
    for node in iter_nodes(root):
        if not node.augments:
            continue
        augmented = index.get(node.augments)
        if augmented is None:
            diagnostics.warn(
                UNKNOWN_AUGMENTS,
                node.label,
                f"Can't find augmenting oid {node.augments} for {node.label}",
            )
            continue
        for child in node.children:
            child.indexes = list(augmented.indexes)
        node.indexes = list(augmented.indexes)


def propagate_table_indexes(root: Node, index: NameIndex, diagnostics: Diagnostics) -> None:
    """Copy indexes from table entries down to their columns."""
    for node in iter_nodes(root):
        if node.indexes:
            for child in node.children:
                child.indexes = list(node.indexes)


def reclassify_from_hints(root: Node, index: NameIndex, diagnostics: Diagnostics) -> None:
    for node in iter_nodes(root):
        if node.hint == _MAC_ADDRESS_HINT:
            node.type = PHYS_ADDRESS48
        if _DISPLAY_STRING_HINT_RE.search(node.hint):
            node.type = DISPLAY_STRING
        # Some MIBs refer to RFC1213 for this, which is too old to
        # have the right hint set.
        if node.textual_convention == DISPLAY_STRING:
            node.type = DISPLAY_STRING


PASSES: Tuple[TreePass, ...] = (
    trim_descriptions,
    fix_self_indexes,
    propagate_augments,
    propagate_table_indexes,
    reclassify_from_hints,
)


def prepare_tree(root: Node, diagnostics: Optional[Diagnostics] = None) -> NameIndex:
    """Normalize ``root`` in place and return its name index.

    The index is built first: node OIDs and labels are never rewritten,
    and the augmentation pass dereferences it.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    index = NameIndex(root)
    for tree_pass in PASSES:
        logger.debug("Running tree pass %s", tree_pass.__name__)
        tree_pass(root, index, diagnostics)
    return index
