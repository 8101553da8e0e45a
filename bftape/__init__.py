from .errors import (
    InterpreterError,
    MaxSizeExceeded,
    MismatchedBracket,
    RunFailed,
    StepLimitExceeded,
)
from .inspector import ExecutionState, InspectorSession
from .instructions import Instruction, parse_source, render_source
from .program import Program
from .runner import RunResult, Runner
from .streams import BufferedInput, RecordingOutput, stdin_input, stdout_output
from .tape import Tape

__all__ = [
    "BufferedInput",
    "ExecutionState",
    "InspectorSession",
    "Instruction",
    "InterpreterError",
    "MaxSizeExceeded",
    "MismatchedBracket",
    "Program",
    "RecordingOutput",
    "RunFailed",
    "RunResult",
    "Runner",
    "StepLimitExceeded",
    "Tape",
    "parse_source",
    "render_source",
    "stdin_input",
    "stdout_output",
]
