"""Fatal errors raised by the config generator.

Only defects in explicit user directives are fatal. Per-node problems
(unsupported types, dangling AUGMENTS or index references) are recorded
as diagnostics instead and never raise.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for errors that abort a generator run."""


class ConfigError(GeneratorError):
    """Raised when the directives document is malformed."""

    def __init__(self, message: str, module: str | None = None) -> None:
        self.module = module
        if module:
            message = f"module '{module}': {message}"
        super().__init__(message)


class UnknownWalkTargetError(GeneratorError):
    """Raised when a walk entry resolves to no known OID or label."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Cannot find oid '{target}' to walk")


class UnknownLookupIndexError(GeneratorError):
    """Raised when a lookup's new_index resolves to no known node."""

    def __init__(self, index: str) -> None:
        self.index = index
        super().__init__(f"Unknown index '{index}'")


class UnsupportedLookupTypeError(GeneratorError):
    """Raised when a lookup target has a type with no metric mapping."""

    def __init__(self, index: str, node_type: str) -> None:
        self.index = index
        self.node_type = node_type
        super().__init__(f"Unknown index type {node_type} for {index}")
