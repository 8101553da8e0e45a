from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import MaxSizeExceeded


@dataclass
class Tape:
    """Byte cells addressed by a signed pointer.

    Cells at negative positions live in ``left`` (position ``p`` at index
    ``-p - 1``), the origin and positive positions live in ``right``. Both
    lists only ever grow, and together never hold more than ``max_size``
    cells.
    """

    max_size: int

    left: List[int] = field(init=False, repr=False)
    right: List[int] = field(init=False, repr=False)
    _pointer: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int):
            raise ValueError("max_size must be an integer")
        if self.max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.left = []
        self.right = [0]
        self._pointer = 0

    def __len__(self) -> int:
        return len(self.left) + len(self.right)

    @property
    def pointer(self) -> int:
        return self._pointer

    def read(self) -> int:
        if self._pointer < 0:
            return self.left[-self._pointer - 1]
        return self.right[self._pointer]

    def write(self, value: int) -> None:
        value &= 0xFF
        if self._pointer < 0:
            self.left[-self._pointer - 1] = value
        else:
            self.right[self._pointer] = value

    def increment(self) -> None:
        self.write(self.read() + 1)

    def decrement(self) -> None:
        self.write(self.read() - 1)

    def move_left(self) -> None:
        # Target position pointer - 1 maps to left[-pointer] when non-positive.
        if self._pointer <= 0 and len(self.left) <= -self._pointer:
            self._grow(self.left)
        self._pointer -= 1

    def move_right(self) -> None:
        if self._pointer >= 0 and len(self.right) - 1 <= self._pointer:
            self._grow(self.right)
        self._pointer += 1

    def _grow(self, side: List[int]) -> None:
        if len(self) + 1 > self.max_size:
            raise MaxSizeExceeded(self.max_size)
        side.append(0)

    def bounds(self) -> Tuple[int, int]:
        """Lowest and highest allocated logical positions."""
        return -len(self.left), len(self.right) - 1

    def window(self, radius: int) -> Tuple[int, List[int]]:
        lowest, highest = self.bounds()
        start = max(lowest, self._pointer - radius)
        end = min(highest, self._pointer + radius)
        cells = [self._cell_at(position) for position in range(start, end + 1)]
        return start, cells

    def _cell_at(self, position: int) -> int:
        if position < 0:
            return self.left[-position - 1]
        return self.right[position]


__all__ = ["Tape"]
