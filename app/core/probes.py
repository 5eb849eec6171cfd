"""
Ordered fallback lookups.

A probe list is a sequence of extraction functions tried in turn; the first
non-empty result wins. Field locations that moved across payload revisions are
declared as probe lists instead of nested null checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")

Extractor = Callable[[Any], Optional[T]]


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple, set)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class Probe(Generic[T]):
    """A named extractor. The name shows up in logs when the probe matches."""

    name: str
    extract: Extractor[T]

    def __call__(self, source: Any) -> Optional[T]:
        value = self.extract(source)
        return None if is_empty(value) else value


class ProbeList(Generic[T]):
    """Ordered probes over a single source value."""

    def __init__(self, probes: Iterable[Probe[T]]) -> None:
        self._probes: tuple[Probe[T], ...] = tuple(probes)

    @property
    def probes(self) -> Sequence[Probe[T]]:
        return self._probes

    def first_match(self, source: Any) -> tuple[Optional[str], Optional[T]]:
        """Return ``(probe_name, value)`` for the first non-empty probe, or ``(None, None)``."""
        for probe in self._probes:
            value = probe(source)
            if value is not None:
                return probe.name, value
        return None, None

    def resolve(self, source: Any) -> Optional[T]:
        return self.first_match(source)[1]

