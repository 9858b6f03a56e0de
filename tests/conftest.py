"""Shared fixtures: a small IF-MIB shaped object tree."""

import os
import sys
from pathlib import Path
from typing import Callable, Tuple

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mibgen.diagnostics import Diagnostics  # noqa: E402
from mibgen.name_index import NameIndex  # noqa: E402
from mibgen.normalizer import prepare_tree  # noqa: E402
from mibgen.tree import Node  # noqa: E402

IF_ENTRY = "1.3.6.1.2.1.2.2.1"
IF_X_ENTRY = "1.3.6.1.2.1.31.1.1.1"


def build_if_mib_tree() -> Node:
    """mib-2 with system, ifTable and an ifXTable augmenting ifEntry."""
    system = Node(
        oid="1.3.6.1.2.1.1",
        label="system",
        children=[
            Node(
                oid="1.3.6.1.2.1.1.1",
                label="sysDescr",
                type="OCTETSTR",
                access="read-only",
                textual_convention="DisplayString",
                description="A textual description of the entity.  This value\n"
                "should include the full name.",
            ),
            Node(
                oid="1.3.6.1.2.1.1.3",
                label="sysUpTime",
                type="TIMETICKS",
                access="read-only",
                description="The time since the network management portion of the system was last re-initialized.",
            ),
        ],
    )
    if_entry = Node(
        oid=IF_ENTRY,
        label="ifEntry",
        access="not-accessible",
        indexes=["ifIndex"],
        children=[
            Node(
                oid=f"{IF_ENTRY}.1",
                label="ifIndex",
                type="INTEGER",
                access="read-only",
                description="A unique value, greater than zero, for each interface.",
            ),
            Node(
                oid=f"{IF_ENTRY}.2",
                label="ifDescr",
                type="OCTETSTR",
                access="read-only",
                hint="255a",
                description="A textual string containing information about the interface.",
            ),
            Node(
                oid=f"{IF_ENTRY}.6",
                label="ifPhysAddress",
                type="OCTETSTR",
                access="read-only",
                hint="1x:",
                description="The interface's address at its protocol sub-layer.",
            ),
            Node(
                oid=f"{IF_ENTRY}.10",
                label="ifInOctets",
                type="COUNTER",
                access="read-only",
                description="The total number of octets received on the interface.",
            ),
        ],
    )
    interfaces = Node(
        oid="1.3.6.1.2.1.2",
        label="interfaces",
        children=[
            Node(
                oid="1.3.6.1.2.1.2.1",
                label="ifNumber",
                type="INTEGER",
                access="read-only",
                description="The number of network interfaces.",
            ),
            Node(
                oid="1.3.6.1.2.1.2.2",
                label="ifTable",
                access="not-accessible",
                children=[if_entry],
            ),
        ],
    )
    if_x_entry = Node(
        oid=IF_X_ENTRY,
        label="ifXEntry",
        access="not-accessible",
        augments="ifEntry",
        children=[
            Node(
                oid=f"{IF_X_ENTRY}.1",
                label="ifName",
                type="OCTETSTR",
                access="read-only",
                textual_convention="DisplayString",
                description="The textual name of the interface.",
            ),
            Node(
                oid=f"{IF_X_ENTRY}.6",
                label="ifHCInOctets",
                type="COUNTER64",
                access="read-only",
                description="The total number of octets received on the interface.",
            ),
            Node(
                oid=f"{IF_X_ENTRY}.15",
                label="ifHighSpeed",
                type="GAUGE",
                access="accessible-for-notify",
                description="An estimate of the interface's current bandwidth.",
            ),
        ],
    )
    if_mib = Node(
        oid="1.3.6.1.2.1.31",
        label="ifMIB",
        children=[
            Node(
                oid="1.3.6.1.2.1.31.1",
                label="ifMIBObjects",
                children=[
                    Node(
                        oid="1.3.6.1.2.1.31.1.1",
                        label="ifXTable",
                        access="not-accessible",
                        children=[if_x_entry],
                    )
                ],
            )
        ],
    )
    return Node(
        oid="1.3.6.1.2.1",
        label="mib-2",
        children=[system, interfaces, if_mib],
    )


@pytest.fixture
def tree_factory() -> Callable[[], Node]:
    """Return a builder so tests can get several independent trees."""
    return build_if_mib_tree


@pytest.fixture
def if_mib_tree() -> Node:
    return build_if_mib_tree()


@pytest.fixture
def prepared_tree(if_mib_tree: Node) -> Tuple[Node, NameIndex, Diagnostics]:
    """The IF-MIB tree after normalization, with its index and diagnostics."""
    diagnostics = Diagnostics()
    index = prepare_tree(if_mib_tree, diagnostics)
    return if_mib_tree, index, diagnostics

