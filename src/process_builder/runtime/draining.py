"""Drain a running child's stdout/stderr into an output forwarder.

process-builder runtime module v0.1.0

Key design points:
- One daemon reader thread per redirected stream, so a child that fills one
  pipe while the other is idle can never stall the run
- Readers push into a single queue; the calling thread pops and invokes the
  forwarder, so forwarder calls never happen on a reader thread
- Lines within one stream keep their emission order; no ordering is
  promised between stdout and stderr
- The loop ends exactly when every stream has reached end-of-stream
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import IO

from ..forwarders import OutputForwarder, OutputStream

__all__ = ["drain_output"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Item:
    """Queue item: a line, or end-of-stream (line is None) with optional error."""

    stream: OutputStream
    line: str | None = None
    error: BaseException | None = None


def _strip_terminator(line: str) -> str:
    # Text mode uses universal newlines, so "\r\n" has already become "\n".
    return line[:-1] if line.endswith("\n") else line


def _read_lines(
    source: Iterable[str],
    stream: OutputStream,
    items: queue.Queue[_Item],
) -> None:
    """Reader thread body: push each line, then end-of-stream."""
    error: BaseException | None = None
    try:
        for line in source:
            items.put(_Item(stream, _strip_terminator(line)))
    except Exception as e:
        error = e
    finally:
        items.put(_Item(stream, error=error))


def _start_reader(
    source: IO[str],
    stream: OutputStream,
    items: queue.Queue[_Item],
) -> threading.Thread:
    thread = threading.Thread(
        target=_read_lines,
        args=(source, stream, items),
        name=f"process-builder-{stream.value}-reader",
        daemon=True,
    )
    thread.start()
    return thread


def drain_output(
    process: subprocess.Popen[str],
    forwarder: OutputForwarder,
) -> None:
    """Forward every line of process.stdout / process.stderr until both close.

    Streams that were not redirected (None) count as already closed.

    Args:
        process: A started process opened in text mode
        forwarder: Sink for the lines

    Raises:
        Whatever reading a stream raised, unwrapped, or whatever the
        forwarder raised. Reader threads are joined before either propagates.
    """
    items: queue.Queue[_Item] = queue.Queue()
    readers: list[threading.Thread] = []
    counts = {OutputStream.STDOUT: 0, OutputStream.STDERR: 0}

    for source, stream in (
        (process.stdout, OutputStream.STDOUT),
        (process.stderr, OutputStream.STDERR),
    ):
        if source is not None:
            readers.append(_start_reader(source, stream, items))

    logger.debug(f"Draining output pid={process.pid} streams={len(readers)}")

    open_streams = len(readers)
    read_error: BaseException | None = None
    try:
        while open_streams:
            item = items.get()
            if item.line is None:
                open_streams -= 1
                if item.error is not None and read_error is None:
                    read_error = item.error
                continue
            counts[item.stream] += 1
            if item.stream is OutputStream.STDOUT:
                forwarder.write_output_line(item.line)
            else:
                forwarder.write_error_line(item.line)
    finally:
        for reader in readers:
            reader.join()

    if read_error is not None:
        raise read_error

    logger.debug(
        f"Drained output pid={process.pid} "
        f"stdout_lines={counts[OutputStream.STDOUT]} "
        f"stderr_lines={counts[OutputStream.STDERR]}"
    )
