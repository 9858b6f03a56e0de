"""OID utility functions for consistent OID handling across the generator.

OIDs are carried as dotted-decimal strings ("1.3.6.1.2.1.2") through the
tree, the name index and the generated config. Tuples of integers are
only used where pysnmp hands them to us.
"""

from typing import Iterable, List, Tuple


def oid_str_to_tuple(oid_str: str) -> Tuple[int, ...]:
    """Convert OID string to tuple of integers.

    Handles various OID string formats:
    - With leading dot: ".1.3.6.1.2.1.1.1.0"
    - Without leading dot: "1.3.6.1.2.1.1.1.0"
    - Empty strings return empty tuple

    Examples:
        >>> oid_str_to_tuple("1.3.6.1.2.1.1.1.0")
        (1, 3, 6, 1, 2, 1, 1, 1, 0)
        >>> oid_str_to_tuple("")
        ()
    """
    oid_str = oid_str.strip()
    if oid_str.startswith("."):
        oid_str = oid_str[1:]
    if not oid_str:
        return tuple()
    return tuple(int(x) for x in oid_str.split("."))


def oid_tuple_to_str(oid_tuple: Tuple[int, ...]) -> str:
    """Convert OID tuple to dot-separated string.

    Examples:
        >>> oid_tuple_to_str((1, 3, 6, 1, 2, 1, 1, 1, 0))
        '1.3.6.1.2.1.1.1.0'
    """
    return ".".join(str(x) for x in oid_tuple)


def is_oid_prefix(prefix: str, oid: str) -> bool:
    """True if ``prefix`` is ``oid`` or one of its ancestors.

    The test respects segment boundaries: "1.3.6.1" is a prefix of
    "1.3.6.1.2" but not of "1.3.6.10".
    """
    return (oid + ".").startswith(prefix + ".")


def minimize_oids(oids: Iterable[str]) -> List[str]:
    """Reduce a set of overlapping OID subtrees.

    Returns the sorted subset of ``oids`` in which no entry is a dotted
    prefix of another. Every dropped OID lies under a kept one.

    Plain string sorting is enough: "." sorts before every digit, so an
    OID is immediately followed by the contiguous block of its
    descendants.

    Examples:
        >>> minimize_oids(["1.3.6.1.2.1.2", "1.3.6.1.2.1.2.2.1.10", "1.3.6.1.2.1.1"])
        ['1.3.6.1.2.1.1', '1.3.6.1.2.1.2']
    """
    minimized: List[str] = []
    prev = ""
    for oid in sorted(set(oids)):
        if not prev or not is_oid_prefix(prev, oid):
            minimized.append(oid)
            prev = oid
    return minimized
