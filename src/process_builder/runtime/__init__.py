"""Runtime module for draining child process output.

Reads both output streams of a running child and dispatches their lines
to an output forwarder until both streams are closed.
"""

from __future__ import annotations

from .draining import drain_output

__all__ = [
    "drain_output",
]
