"""
Deterministic sequence generator for fleet simulation.

A minimal multiplicative-congruential stream.  Low period and low
quality, but every implementation that follows the same recurrence
produces the same fleet from the same seed, which is what golden-value
tests rely on.
"""

from config import LCG_MULTIPLIER, LCG_INCREMENT, LCG_MODULUS


class SeededSequence:
    """Pseudo-random stream advanced by a fixed congruential recurrence.

    Each call to :meth:`next` updates the internal state as::

        state = (state * 9301 + 49297) mod 233280

    and returns ``state / 233280``.  One instance is created per fleet
    generation run and is never reseeded.

    Args:
        seed: Integer seed.  Any integer is valid.

    Raises:
        TypeError: If seed is not an integer.
    """

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise TypeError(f"seed must be an integer, got {type(seed).__name__}")
        self._state = seed

    @property
    def state(self) -> int:
        """Current integer state of the recurrence."""
        return self._state

    def next(self) -> float:
        """Advance the stream and return a value in [0, 1)."""
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS

    def range(self, low: float, high: float) -> float:
        """Return a value in [low, high) consuming exactly one draw."""
        return low + self.next() * (high - low)
