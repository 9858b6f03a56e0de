"""Type and access classification for MIB nodes.

Type tokens follow the net-snmp naming (INTEGER, OCTETSTR, COUNTER64,
...), plus the locally assigned "DisplayString" and "PhysAddress48" set
by the hint reclassification pass.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

GAUGE = "gauge"
COUNTER = "counter"
OCTET_STRING = "OctetString"
IP_ADDR = "IpAddr"
INET_ADDRESS = "InetAddress"
DISPLAY_STRING = "DisplayString"
PHYS_ADDRESS48 = "PhysAddress48"

METRIC_TYPES: Dict[str, str] = {
    "INTEGER": GAUGE,
    "GAUGE": GAUGE,
    "TIMETICKS": GAUGE,
    "UINTEGER": GAUGE,
    "UNSIGNED32": GAUGE,
    "INTEGER32": GAUGE,
    "COUNTER": COUNTER,
    "COUNTER64": COUNTER,
    "OCTETSTR": OCTET_STRING,
    "BITSTRING": OCTET_STRING,
    "IPADDR": IP_ADDR,
    # Not verified against a real NETADDR object.
    "NETADDR": INET_ADDRESS,
    PHYS_ADDRESS48: PHYS_ADDRESS48,
    DISPLAY_STRING: DISPLAY_STRING,
}

OUTPUT_KINDS = frozenset(METRIC_TYPES.values())

ACCESS_READONLY = "read-only"
ACCESS_READWRITE = "read-write"
ACCESS_CREATE = "create"
ACCESS_NOACCESS = "no-access"
ACCESS_NOTIFY = "notify"
ACCESS_WRITEONLY = "write-only"

# SMI keywords and net-snmp constant names for the canonical tokens.
_ACCESS_ALIASES: Dict[str, str] = {
    "readonly": ACCESS_READONLY,
    "read-only": ACCESS_READONLY,
    "access_readonly": ACCESS_READONLY,
    "readwrite": ACCESS_READWRITE,
    "read-write": ACCESS_READWRITE,
    "access_readwrite": ACCESS_READWRITE,
    "create": ACCESS_CREATE,
    "read-create": ACCESS_CREATE,
    "readcreate": ACCESS_CREATE,
    "access_create": ACCESS_CREATE,
    "no-access": ACCESS_NOACCESS,
    "noaccess": ACCESS_NOACCESS,
    "not-accessible": ACCESS_NOACCESS,
    "access_noaccess": ACCESS_NOACCESS,
    "notify": ACCESS_NOTIFY,
    "accessible-for-notify": ACCESS_NOTIFY,
    "access_notify": ACCESS_NOTIFY,
    "write-only": ACCESS_WRITEONLY,
    "writeonly": ACCESS_WRITEONLY,
    "access_writeonly": ACCESS_WRITEONLY,
}

# no-access counts as exposed; notify and write-only do not.
EXPOSED_ACCESS = frozenset(
    {ACCESS_READONLY, ACCESS_READWRITE, ACCESS_CREATE, ACCESS_NOACCESS}
)


def metric_type(node_type: str) -> Tuple[str, bool]:
    """Map a syntax type token to an output metric kind.

    Returns:
        ``(kind, True)`` for supported types, ``("", False)`` otherwise.
    """
    kind = METRIC_TYPES.get(node_type)
    if kind is None:
        return "", False
    return kind, True


def normalize_access(access: str) -> Optional[str]:
    """Canonical access token for an SMI keyword or net-snmp name."""
    return _ACCESS_ALIASES.get(access.strip().lower())


def metric_access(access: str) -> bool:
    """True if a node with this access token is exposed as a metric."""
    return normalize_access(access) in EXPOSED_ACCESS
