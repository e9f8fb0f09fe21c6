from __future__ import annotations

import random
import threading
from typing import Iterable


class Reservoir:
    """Single-pass uniform reservoir ("Algorithm R"), safe to snapshot from another thread."""

    def __init__(
        self,
        capacity: int,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        if capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity}")
        self._capacity = capacity
        self._seen = 0
        self._sample: list[str] = []
        self._rng = rng if rng is not None else random.Random(seed)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def seen(self) -> int:
        with self._lock:
            return self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._sample)

    def _probability(self) -> float:
        if self._seen < self._capacity:
            return 0.0
        # The incoming record is number seen + 1.
        return self._capacity / (self._seen + 1)

    def inclusion_probability(self) -> float:
        """Probability that the next record replaces a slot (0 while filling)."""
        with self._lock:
            return self._probability()

    def add(self, record: str) -> None:
        with self._lock:
            if self._seen < self._capacity:
                self._sample.append(record)
            elif self._rng.random() < self._probability():
                self._sample[self._rng.randrange(self._capacity)] = record
            self._seen += 1

    def extend(self, records: Iterable[str]) -> None:
        for record in records:
            self.add(record)

    def sample(self) -> list[str]:
        """Return a copy of the retained records in slot order."""
        with self._lock:
            return list(self._sample)

    snapshot = sample

    def __repr__(self) -> str:
        return f"Reservoir(capacity={self._capacity}, seen={self.seen})"
