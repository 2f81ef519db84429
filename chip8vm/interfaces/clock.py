"""Timer clock interface shared by the executor and host collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ITimerClock(ABC):
    """Delay/sound counter pair decremented on a fixed wall-clock cadence.

    The executor only ever calls the get/set accessors; the decrement
    schedule is private to the implementation.
    """

    @property
    @abstractmethod
    def frequency(self) -> int:
        """Decrement rate in Hz."""
        ...

    @abstractmethod
    def get_delay(self) -> int:
        ...

    @abstractmethod
    def set_delay(self, value: int) -> None:
        ...

    @abstractmethod
    def get_sound(self) -> int:
        ...

    @abstractmethod
    def set_sound(self, value: int) -> None:
        ...

    @abstractmethod
    def tick(self, intervals: int = 1) -> None:
        """Apply the given number of decrement intervals."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Zero both counters."""
        ...

    @property
    def is_sounding(self) -> bool:
        """True while the sound timer is non-zero."""
        return self.get_sound() > 0
