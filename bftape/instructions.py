from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Tuple


class Instruction(str, Enum):
    MOVE_LEFT = "<"
    MOVE_RIGHT = ">"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    BEGIN_LOOP = "["
    END_LOOP = "]"

    @classmethod
    def from_char(cls, char: str) -> Optional["Instruction"]:
        try:
            return cls(char)
        except ValueError:
            return None

    @property
    def is_loop_marker(self) -> bool:
        return self in (Instruction.BEGIN_LOOP, Instruction.END_LOOP)


def parse_source(code: str) -> Tuple[Instruction, ...]:
    """Keep the eight instruction symbols of ``code``; everything else is a comment."""
    instructions = []
    for char in code:
        instruction = Instruction.from_char(char)
        if instruction is not None:
            instructions.append(instruction)
    return tuple(instructions)


def render_source(instructions: Iterable[Instruction]) -> str:
    return "".join(instruction.value for instruction in instructions)


__all__ = ["Instruction", "parse_source", "render_source"]
