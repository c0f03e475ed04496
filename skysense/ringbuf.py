"""Fixed-size ring buffer of float samples with windowed averages."""

from __future__ import annotations

from collections import deque
from itertools import cycle, islice

DEFAULT_SIZE = 20


class RingBuffer:
    """Circular store of the most recent samples, initially all zero."""

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size <= 0:
            raise ValueError("ring buffer size must be positive")
        self._samples: deque[float] = deque([0.0] * size, maxlen=size)

    @property
    def size(self) -> int:
        return self._samples.maxlen or 0

    @property
    def samples(self) -> tuple[float, ...]:
        """Stored samples, oldest first."""
        return tuple(self._samples)

    def add_sample(self, sample: float) -> None:
        """Store a sample, overwriting the oldest one."""
        self._samples.append(float(sample))

    def average_oldest(self, num_samples: int) -> float:
        """Average of the oldest samples, wrapping round if more are asked than stored."""
        return self._average(cycle(self._samples), num_samples)

    def average_newest(self, num_samples: int) -> float:
        """Average of the newest samples, wrapping round if more are asked than stored."""
        return self._average(cycle(reversed(self._samples)), num_samples)

    @staticmethod
    def _average(source, num_samples: int) -> float:
        if num_samples <= 0:
            raise ValueError("number of samples must be positive")
        return sum(islice(source, num_samples)) / num_samples