"""Cancellation tokens handed to in-flight work for a currency selection."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CancellationToken:
    """Identifies one selection generation; cancelled once it is superseded."""

    generation: int
    base: str
    quote: str
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()
