from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, Optional, Union

from .runner import InputFn, OutputFn


def stdin_input(stream: Optional[BinaryIO] = None) -> InputFn:
    """Read single bytes from ``stream`` (stdin by default); end of stream reads as 0."""

    def read_byte() -> int:
        source = stream if stream is not None else sys.stdin.buffer
        data = source.read(1)
        if not data:
            return 0
        return data[0]

    return read_byte


def stdout_output(stream: Optional[BinaryIO] = None) -> OutputFn:
    def write_byte(value: int) -> None:
        sink = stream if stream is not None else sys.stdout.buffer
        sink.write(bytes([value]))

    return write_byte


class BufferedInput:
    """Serve a fixed byte sequence, then zeros once it is exhausted."""

    def __init__(self, data: Union[bytes, str, Iterable[int]] = b"") -> None:
        if isinstance(data, str):
            data = data.encode("latin-1")
        self._values = [value & 0xFF for value in data]
        self._position = 0

    def __call__(self) -> int:
        if self._position >= len(self._values):
            return 0
        value = self._values[self._position]
        self._position += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self._values) - self._position


class RecordingOutput:
    def __init__(self) -> None:
        self.data = bytearray()

    def __call__(self, value: int) -> None:
        self.data.append(value)

    def text(self) -> str:
        return self.data.decode("latin-1")


__all__ = ["BufferedInput", "RecordingOutput", "stdin_input", "stdout_output"]
