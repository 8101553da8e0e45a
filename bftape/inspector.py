from __future__ import annotations

import argparse
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import RunFailed, StepLimitExceeded
from .instructions import render_source
from .runner import Runner
from .streams import BufferedInput, RecordingOutput

DEFAULT_MAX_SIZE = 30000


def _to_input_bytes(data: str) -> List[int]:
    return [ord(ch) & 0xFF for ch in data]


@dataclass
class ExecutionState:
    step: int
    pc: int
    instruction: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: str
    code_length: int


@dataclass
class InspectorSession:
    code: str
    input_template: List[int]
    max_size: int = DEFAULT_MAX_SIZE
    tape_window: int = 10
    max_steps: Optional[int] = None
    history_limit: int = 200

    def __post_init__(self) -> None:
        self.breakpoints: set[int] = set()
        self.history: List[ExecutionState] = []
        self.hit_breakpoint: Optional[int] = None
        self._init_runner()

    def _init_runner(self) -> None:
        self.output = RecordingOutput()
        self.runner = Runner(
            self.max_size,
            self.code,
            BufferedInput(self.input_template),
            self.output,
        )
        # Source text with comments stripped; pc indexes into this.
        self.program_text = render_source(self.runner.program.instructions)
        self.finished = False
        self.error: Optional[RunFailed] = None
        self.last_state: ExecutionState = self._snapshot(None)
        self._record_state(self.last_state)

    def restart(self) -> None:
        self.history.clear()
        self.hit_breakpoint = None
        self._init_runner()

    def _snapshot(self, instruction: Optional[str]) -> ExecutionState:
        tape = self.runner.tape
        start, cells = tape.window(self.tape_window)
        return ExecutionState(
            step=self.runner.step_count,
            pc=self.runner.program.pc,
            instruction=instruction,
            pointer=tape.pointer,
            tape_start=start,
            tape=cells,
            output=self.output.text(),
            code_length=len(self.runner.program),
        )

    def _record_state(self, state: ExecutionState) -> None:
        self.history.append(state)
        if len(self.history) > self.history_limit:
            self.history.pop(0)
        self.last_state = state

    def _advance(self) -> ExecutionState:
        if (
            self.max_steps is not None
            and self.runner.step_count >= self.max_steps
            and not self.runner.terminated
        ):
            self.finished = True
            raise StepLimitExceeded("Program exceeded allowed step count")
        instruction = self.runner.program.current()
        try:
            result = self.runner.run_for(1)
        except RunFailed as exc:
            self.finished = True
            self.error = exc
            raise
        if result.terminated:
            self.finished = True
            instruction = None
        state = self._snapshot(instruction.value if instruction is not None else None)
        self._record_state(state)
        return state

    def step_forward(self, count: int = 1) -> Sequence[ExecutionState]:
        states: List[ExecutionState] = []
        if count <= 0:
            return states
        self.hit_breakpoint = None
        for _ in range(count):
            if self.finished:
                break
            state = self._advance()
            states.append(state)
            if self.finished:
                break
            if state.pc in self.breakpoints:
                self.hit_breakpoint = state.pc
                break
        return states

    def run_until_break(self, limit: Optional[int] = None) -> Sequence[ExecutionState]:
        states: List[ExecutionState] = []
        executed = 0
        while limit is None or executed < limit:
            step_states = self.step_forward(1)
            if not step_states:
                break
            states.extend(step_states)
            executed += 1
            if self.hit_breakpoint is not None:
                break
        return states

    def run_quantum(self, steps: int) -> ExecutionState:
        """Run up to ``steps`` steps in one go, ignoring breakpoints.

        Only the state at the end of the quantum is recorded in the history.
        """
        if self.finished:
            return self.last_state
        budget = steps
        if self.max_steps is not None:
            budget = min(steps, self.max_steps - self.runner.step_count)
            if budget <= 0:
                if not self.runner.terminated:
                    self.finished = True
                    raise StepLimitExceeded("Program exceeded allowed step count")
                # Only the final terminating decode is left; it costs no step.
                budget = 1
        self.hit_breakpoint = None
        try:
            result = self.runner.run_for(budget)
        except RunFailed as exc:
            self.finished = True
            self.error = exc
            raise
        finally:
            self._record_state(self._snapshot(None))
        if result.terminated:
            self.finished = True
        return self.last_state

    def current_state(self) -> ExecutionState:
        return self.last_state

    def add_breakpoint(self, pc: int) -> None:
        self.breakpoints.add(pc)

    def remove_breakpoint(self, pc: int) -> bool:
        if pc in self.breakpoints:
            self.breakpoints.remove(pc)
            return True
        return False

    def clear_breakpoints(self) -> None:
        self.breakpoints.clear()

    def list_breakpoints(self) -> List[int]:
        return sorted(self.breakpoints)

    def is_finished(self) -> bool:
        return self.finished


def format_state(state: ExecutionState, code: str) -> str:
    lines: List[str] = []
    instruction_display = state.instruction if state.instruction is not None else "(none)"
    lines.append(
        f"step={state.step} pc={state.pc}/{state.code_length} "
        f"instruction={instruction_display!r} pointer={state.pointer}"
    )
    if state.output:
        lines.append(f"output={state.output!r}")
    tape_parts: List[str] = []
    for idx, value in enumerate(state.tape):
        position = state.tape_start + idx
        cell_repr = f"{position}:{value:03}"
        if position == state.pointer:
            tape_parts.append(f"[{cell_repr}]")
        else:
            tape_parts.append(f" {cell_repr} ")
    lines.append("tape=" + " ".join(tape_parts))
    lines.append(f"code={_format_code_window(code, state.pc)}")
    return "\n".join(lines)


def _format_code_window(code: str, pc: int, window: int = 16) -> str:
    if not code:
        return "(empty)"
    start = max(0, pc - window)
    end = min(len(code), pc + window + 1)
    pieces: List[str] = []
    for index in range(start, end):
        ch = code[index]
        if index == pc:
            pieces.append(f"[{ch}]")
        else:
            pieces.append(ch)
    if pc >= len(code):
        pieces.append("[END]")
    return "".join(pieces)


def run_repl(session: InspectorSession) -> None:
    print("Tape machine inspector (type 'help' for commands)")
    _print_state(session.current_state(), session)
    while True:
        try:
            line = input("(inspect) ").strip()
        except EOFError:
            print()
            break
        if not line:
            continue
        parts = shlex.split(line)
        command = parts[0].lower()
        args = parts[1:]
        try:
            if command in {"n", "next"}:
                count = max(1, int(args[0])) if args else 1
                states = session.step_forward(count)
                if states:
                    _print_state(states[-1], session)
                elif session.is_finished():
                    print("Program has halted.")
            elif command in {"r", "run"}:
                limit = int(args[0]) if args else None
                states = session.run_until_break(limit)
                if states:
                    _print_state(states[-1], session)
                    if session.hit_breakpoint is not None:
                        print(f"Hit breakpoint at pc={session.hit_breakpoint}.")
                        session.hit_breakpoint = None
                elif session.is_finished():
                    print("Program has halted.")
            elif command in {"q", "quantum"}:
                if not args:
                    print("Specify the number of steps.")
                    continue
                state = session.run_quantum(max(1, int(args[0])))
                _print_state(state, session)
                if session.is_finished():
                    print("Program has halted.")
            elif command == "state":
                _print_state(session.current_state(), session)
            elif command == "history":
                count = int(args[0]) if args else 10
                for state in session.history[-count:]:
                    print("-" * 40)
                    print(format_state(state, session.program_text))
            elif command == "break":
                if not args:
                    print("Specify a program counter.")
                    continue
                pc = int(args[0])
                session.add_breakpoint(pc)
                print(f"Breakpoint set at pc={pc}.")
            elif command == "breaks":
                points = session.list_breakpoints()
                if not points:
                    print("No breakpoints.")
                else:
                    print("Breakpoints:", ", ".join(map(str, points)))
            elif command == "clear":
                if not args:
                    session.clear_breakpoints()
                    print("All breakpoints removed.")
                else:
                    pc = int(args[0])
                    if session.remove_breakpoint(pc):
                        print(f"Breakpoint at pc={pc} removed.")
                    else:
                        print(f"No breakpoint at pc={pc}.")
            elif command == "restart":
                session.restart()
                print("Session restarted.")
                _print_state(session.current_state(), session)
            elif command in {"quit", "exit"}:
                break
            elif command == "help":
                _print_help()
            else:
                print("Unknown command, see 'help'.")
        except ValueError:
            print("Invalid number.", file=sys.stderr)
        except StepLimitExceeded:
            print("Step limit reached.", file=sys.stderr)
        except RunFailed as exc:
            _print_state(session.current_state(), session)
            print(f"error after {session.runner.step_count} steps: {exc.error}", file=sys.stderr)


def _print_state(state: ExecutionState, session: InspectorSession) -> None:
    print("-" * 40)
    print(format_state(state, session.program_text))


def _print_help() -> None:
    print(
        "Commands:\n"
        "  next [N]    : execute N steps (default 1)\n"
        "  run [N]     : run until a breakpoint, halt, or N steps\n"
        "  quantum N   : run N steps at once, ignoring breakpoints\n"
        "  state       : show the current state\n"
        "  history [N] : show the last N recorded states\n"
        "  break PC    : set a breakpoint at PC\n"
        "  breaks      : list breakpoints\n"
        "  clear [PC]  : remove a breakpoint (all when PC is omitted)\n"
        "  restart     : reset the session\n"
        "  quit/exit   : leave\n"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Tape machine step inspector")
    parser.add_argument("source", help="Path to the source file")
    parser.add_argument("--input", default="", help="Input bytes given to the program")
    parser.add_argument(
        "--max-size",
        type=int,
        default=DEFAULT_MAX_SIZE,
        help=f"Maximum number of tape cells (default: {DEFAULT_MAX_SIZE})",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=5_000_000,
        help="Step limit (default: 5,000,000)",
    )
    parser.add_argument("--tape-window", type=int, default=10, help="Cells shown around the pointer")
    parser.add_argument(
        "--history-limit",
        type=int,
        default=200,
        help="Number of states kept in the history",
    )
    args = parser.parse_args(argv)

    try:
        source_text = Path(args.source).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Cannot open source file: {exc}", file=sys.stderr)
        return 1

    try:
        session = InspectorSession(
            source_text,
            input_template=_to_input_bytes(args.input),
            max_size=args.max_size,
            tape_window=args.tape_window,
            max_steps=args.max_steps,
            history_limit=args.history_limit,
        )
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    run_repl(session)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
