"""Output forwarders: sinks for the lines a child process writes.

process-builder forwarders v0.1.0

A forwarder receives every line of a running child's standard output and
standard error, attributed by stream. The builder never implements or owns
the forwarder it is given; the caller decides its lifetime and, when one
forwarder is shared by concurrent runs, its thread safety.

This module provides:
- OutputForwarder: the structural contract consumed by the draining loop
- LoggingOutputForwarder: lines go to a logging.Logger
- ConsoleOutputForwarder: lines are echoed to the parent's own console
- RecordingOutputForwarder: lines are kept as OutputLine models
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from enum import Enum
from typing import Protocol, TextIO, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "OutputForwarder",
    "OutputStream",
    "OutputLine",
    "LoggingOutputForwarder",
    "ConsoleOutputForwarder",
    "RecordingOutputForwarder",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class OutputForwarder(Protocol):
    """Consumer of a child process's output lines.

    Both methods are called synchronously on the thread running the
    terminal action, with the line terminator already stripped.
    """

    def write_output_line(self, line: str) -> None:
        """Accept one line of standard output."""
        ...

    def write_error_line(self, line: str) -> None:
        """Accept one line of standard error."""
        ...


class OutputStream(str, Enum):
    """The stream a line was read from."""

    STDOUT = "stdout"
    STDERR = "stderr"


class OutputLine(BaseModel):
    """A single forwarded line.

    Attributes:
        stream: Stream the line came from
        text: Line text without terminator
        timestamp: Unix timestamp (seconds) when the line was forwarded
    """

    model_config = ConfigDict(frozen=True)

    stream: OutputStream
    text: str
    timestamp: float = Field(default_factory=time.time)


class LoggingOutputForwarder:
    """Forward lines to a logger, stderr at a higher level than stdout."""

    def __init__(
        self,
        target: logging.Logger | None = None,
        output_level: int = logging.INFO,
        error_level: int = logging.WARNING,
    ) -> None:
        self.target = target or logger
        self.output_level = output_level
        self.error_level = error_level

    def write_output_line(self, line: str) -> None:
        self.target.log(self.output_level, line)

    def write_error_line(self, line: str) -> None:
        self.target.log(self.error_level, line)


class ConsoleOutputForwarder:
    """Echo lines to the parent's console.

    When no stream is given, sys.stdout / sys.stderr are looked up at write
    time so redirection of the parent's own streams (e.g. by pytest) applies.
    """

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr

    def write_output_line(self, line: str) -> None:
        stream = self._stdout or sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def write_error_line(self, line: str) -> None:
        stream = self._stderr or sys.stderr
        stream.write(line + "\n")
        stream.flush()


class RecordingOutputForwarder:
    """Keep every forwarded line in memory, in arrival order.

    Safe to share between concurrent runs.

    Example:
        recorder = RecordingOutputForwarder()
        ProcessBuilder.create("git").add_argument("status").wait_for_success(recorder)
        print(recorder.output_text)
    """

    def __init__(self) -> None:
        self._lines: list[OutputLine] = []
        self._lock = threading.Lock()

    def write_output_line(self, line: str) -> None:
        self._record(OutputStream.STDOUT, line)

    def write_error_line(self, line: str) -> None:
        self._record(OutputStream.STDERR, line)

    def _record(self, stream: OutputStream, line: str) -> None:
        with self._lock:
            self._lines.append(OutputLine(stream=stream, text=line))

    @property
    def lines(self) -> list[OutputLine]:
        """All recorded lines (copy)."""
        with self._lock:
            return list(self._lines)

    @property
    def output_lines(self) -> list[str]:
        """Text of recorded stdout lines."""
        return [line.text for line in self.lines if line.stream is OutputStream.STDOUT]

    @property
    def error_lines(self) -> list[str]:
        """Text of recorded stderr lines."""
        return [line.text for line in self.lines if line.stream is OutputStream.STDERR]

    @property
    def output_text(self) -> str:
        return "".join(f"{line}\n" for line in self.output_lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
