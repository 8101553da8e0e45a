from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import InterpreterError, RunFailed
from .instructions import Instruction
from .program import Program
from .tape import Tape

logger = logging.getLogger(__name__)

InputFn = Callable[[], int]
OutputFn = Callable[[int], None]


@dataclass(frozen=True)
class RunResult:
    """Outcome of :meth:`Runner.run`.

    ``terminated`` is true once the program ran off its end. Otherwise the
    step budget was used up and ``steps`` tells how many steps this call
    executed.
    """

    terminated: bool
    steps: int


class Runner:
    def __init__(
        self,
        max_size: int,
        code: str,
        input_fn: InputFn,
        output_fn: OutputFn,
    ) -> None:
        self._tape = Tape(max_size)
        self._program = Program.parse(code)
        self._input = input_fn
        self._output = output_fn
        self.step_count = 0
        self.next_halt: Optional[int] = None

    @property
    def tape(self) -> Tape:
        return self._tape

    @property
    def program(self) -> Program:
        return self._program

    @property
    def terminated(self) -> bool:
        return self._program.finished

    def step(self) -> Optional[Instruction]:
        """Execute one instruction; ``None`` means the program has terminated.

        Errors from the tape, the bracket scan or the I/O callables propagate
        unchanged and leave ``step_count`` untouched.
        """
        instruction = self._program.decode_and_advance(self._tape.read())
        if instruction is None:
            return None

        if instruction is Instruction.MOVE_LEFT:
            self._tape.move_left()
        elif instruction is Instruction.MOVE_RIGHT:
            self._tape.move_right()
        elif instruction is Instruction.INCREMENT:
            self._tape.increment()
        elif instruction is Instruction.DECREMENT:
            self._tape.decrement()
        elif instruction is Instruction.OUTPUT:
            self._output(self._tape.read())
        elif instruction is Instruction.INPUT:
            self._tape.write(self._input())

        self.step_count += 1
        return instruction

    def run(self) -> RunResult:
        iteration_steps = 0
        while True:
            if self.next_halt is not None and self.step_count >= self.next_halt:
                return RunResult(terminated=False, steps=iteration_steps)
            try:
                instruction = self.step()
            except (InterpreterError, OSError) as exc:
                logger.debug(
                    "run stopped after %d steps (pc=%d): %s",
                    iteration_steps,
                    self._program.pc,
                    exc,
                )
                raise RunFailed(iteration_steps, exc) from exc
            if instruction is None:
                return RunResult(terminated=True, steps=iteration_steps)
            iteration_steps += 1

    def run_for(self, steps: int) -> RunResult:
        if steps < 0:
            raise ValueError("steps must be non-negative")
        self.next_halt = self.step_count + steps
        try:
            result = self.run()
        finally:
            self.next_halt = None
        if not result.terminated:
            logger.debug(
                "quantum of %d steps ended at step %d (pc=%d, pointer=%d)",
                steps,
                self.step_count,
                self._program.pc,
                self._tape.pointer,
            )
        return result


__all__ = ["InputFn", "OutputFn", "RunResult", "Runner"]
