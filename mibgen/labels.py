"""Label sanitizing for output metric and index names."""

import re

_INVALID_LABEL_CHAR_RE = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_label_name(name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9_]`` with ``_``.

    Examples:
        >>> sanitize_label_name("ifHC-InOctets.1")
        'ifHC_InOctets_1'
    """
    return _INVALID_LABEL_CHAR_RE.sub("_", name)
