"""Structured, non-fatal diagnostics collected during a generator run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List

logger = logging.getLogger(__name__)

# Diagnostic codes
UNKNOWN_AUGMENTS = "unknown-augments"
UNKNOWN_INDEX = "unknown-index"
UNSUPPORTED_INDEX_TYPE = "unsupported-index-type"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    subject: str


class Diagnostics:
    """Collects warnings so callers can inspect them after a run.

    Every recorded diagnostic is also logged at WARNING level.
    """

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def warn(self, code: str, subject: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(code=code, message=message, subject=subject)
        self._items.append(diagnostic)
        logger.warning(message)
        return diagnostic

    def codes(self) -> List[str]:
        return [d.code for d in self._items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
