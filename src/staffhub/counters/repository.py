from __future__ import annotations

from typing import Any, Optional, Protocol


class CounterRepository(Protocol):
    def next_value(self, name: str, *, session: Optional[Any] = None) -> int:
        """Atomically increment the named sequence and return the new value."""

        raise NotImplementedError
