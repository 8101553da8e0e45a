from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .errors import MismatchedBracket
from .instructions import Instruction, parse_source


class Program:
    """Decoded instruction sequence plus the program counter.

    Loop targets are not precomputed: every time a bracket has to jump, the
    partner is found by a linear scan that tracks nesting depth. An unmatched
    bracket is therefore only reported once it is reached with a cell value
    that makes it jump.
    """

    def __init__(self, instructions: Sequence[Instruction]) -> None:
        self._instructions: Tuple[Instruction, ...] = tuple(instructions)
        self._pc = 0

    @classmethod
    def parse(cls, code: str) -> "Program":
        return cls(parse_source(code))

    def __len__(self) -> int:
        return len(self._instructions)

    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return self._instructions

    @property
    def pc(self) -> int:
        return self._pc

    @property
    def finished(self) -> bool:
        return self._pc >= len(self._instructions)

    def current(self) -> Optional[Instruction]:
        if self.finished:
            return None
        return self._instructions[self._pc]

    def decode_and_advance(self, cell_value: int) -> Optional[Instruction]:
        """Consume the instruction at the counter and move the counter on.

        Returns the consumed instruction, or ``None`` once the counter has
        run off the end of the program.
        """
        instruction = self.current()
        if instruction is None:
            return None

        if instruction is Instruction.BEGIN_LOOP:
            if cell_value == 0:
                # Lands on the matching ']', which is decoded again next cycle.
                self._pc = self._find_closing()
            else:
                self._pc += 1
        elif instruction is Instruction.END_LOOP:
            if cell_value != 0:
                self._pc = self._find_opening()
            else:
                self._pc += 1
        else:
            self._pc += 1
        return instruction

    def _find_closing(self) -> int:
        depth = 0
        for index in range(self._pc, len(self._instructions)):
            depth += _depth_change(self._instructions[index], Instruction.BEGIN_LOOP)
            if depth == 0:
                return index
        raise MismatchedBracket("no matching closing bracket", self._pc)

    def _find_opening(self) -> int:
        depth = 0
        for index in range(self._pc, -1, -1):
            depth += _depth_change(self._instructions[index], Instruction.END_LOOP)
            if depth == 0:
                return index
        raise MismatchedBracket("no matching opening bracket", self._pc)


def _depth_change(instruction: Instruction, opener: Instruction) -> int:
    if instruction is opener:
        return 1
    if instruction.is_loop_marker:
        return -1
    return 0


__all__ = ["Program"]
