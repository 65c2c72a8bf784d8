"""
Per-test registry of everything a test double or constant stub touched.

The host test framework calls ``verify_all()`` and ``reset_all()`` once a
test is over; nothing here reaches into the framework itself.
"""

from typing import List, Protocol

from .logging import get_logger

logger = get_logger(__name__)


class Resettable(Protocol):
    def verify(self) -> None: ...

    def reset(self) -> None: ...


class Space:
    """Ordered registry of doubles and stubbers active in the current test."""

    def __init__(self):
        self._entries: List[Resettable] = []

    def register(self, entry: Resettable) -> None:
        if not any(existing is entry for existing in self._entries):
            self._entries.append(entry)

    def is_registered(self, entry: Resettable) -> bool:
        return any(existing is entry for existing in self._entries)

    def verify_all(self) -> None:
        for entry in list(self._entries):
            entry.verify()

    def reset_all(self) -> None:
        """Reset every entry, most recently registered first."""
        entries, self._entries = self._entries, []
        logger.debug(f"Resetting {len(entries)} registered entries")
        errors = []
        for entry in reversed(entries):
            try:
                entry.reset()
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise errors[0]

    def __len__(self) -> int:
        return len(self._entries)


space = Space()
