"""Immutable, chainable builder for launching child processes.

process-builder core v0.1.0

This module provides:
- ProcessSpec: the frozen configuration of one prospective launch
- ProcessBuilder: pure configuration methods plus terminal actions that spawn
- create / dotnet: factories

Key design points:
- Every configuration method returns a new builder; the receiver never changes,
  so one builder can be reused or branched into variants from any thread
- Terminal actions own the process handle for their whole extent and release
  it (pipes closed, child reaped) on every exit path
- A forwarder passed to a terminal action overrides the stored one for that
  call only
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any, Union

from .config import get_config, load_config
from .errors import ExitCodeError, SpawnError
from .forwarders import OutputForwarder
from .runtime import drain_output

__all__ = [
    "ProcessBuilder",
    "ProcessSpec",
    "create",
    "dotnet",
]

logger = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]


def _to_argument(value: Any) -> str:
    """Normalize one argument to str."""
    if isinstance(value, os.PathLike):
        value = os.fspath(value)
    if not isinstance(value, str):
        msg = f"Process arguments must be strings or os.PathLike, got {type(value).__name__}"
        raise TypeError(msg)
    return value


@dataclass(frozen=True)
class ProcessSpec:
    """Configuration of a child process launch.

    Attributes:
        program: Executable path or name
        arguments: Arguments in the order they are passed to the child
        working_directory: Working directory (None = inherit the caller's)
        redirect_standard_output: Pipe stdout (None = inherit the parent's)
        redirect_standard_error: Pipe stderr (None = inherit the parent's)
        output_forwarder: Default forwarder for wait_for_exit / wait_for_success.
            Shared, never closed by the builder.
    """

    program: str
    arguments: tuple[str, ...] = ()
    working_directory: str | None = None
    redirect_standard_output: bool | None = None
    redirect_standard_error: bool | None = None
    output_forwarder: OutputForwarder | None = field(default=None, repr=False)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.arguments]


@dataclass(frozen=True, init=False)
class ProcessBuilder:
    """Fluent configuration and execution of one child process.

    Example:
        builder = ProcessBuilder.create("git").add_arguments("log", "--oneline")
        output = builder.run_and_capture_output()
        builder.add_argument("-5").wait_for_success(LoggingOutputForwarder())
    """

    spec: ProcessSpec

    def __init__(self, program: PathArg | ProcessSpec) -> None:
        """Create a builder for a program, or wrap an existing spec."""
        if not isinstance(program, ProcessSpec):
            program = ProcessSpec(program=_to_argument(program))
        object.__setattr__(self, "spec", program)

    @classmethod
    def create(cls, program: PathArg) -> ProcessBuilder:
        """Create a builder for the given program."""
        return cls(program)

    def _with(self, **changes: Any) -> ProcessBuilder:
        return ProcessBuilder(replace(self.spec, **changes))

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def add_argument(self, argument: PathArg) -> ProcessBuilder:
        return self._with(arguments=(*self.spec.arguments, _to_argument(argument)))

    def add_arguments(self, *arguments: PathArg | Iterable[PathArg]) -> ProcessBuilder:
        """Append arguments in order.

        Accepts either several arguments or a single iterable of arguments:
        ``add_arguments("a", "b")`` and ``add_arguments(["a", "b"])`` are equal.
        """
        if len(arguments) == 1 and not isinstance(arguments[0], (str, os.PathLike)):
            values: Iterable[Any] = arguments[0]  # type: ignore[assignment]
        else:
            values = arguments
        added = tuple(_to_argument(value) for value in values)
        return self._with(arguments=(*self.spec.arguments, *added))

    def set_working_directory(self, working_directory: PathArg) -> ProcessBuilder:
        return self._with(working_directory=_to_argument(working_directory))

    def set_redirect_standard_output(self, redirect: bool = True) -> ProcessBuilder:
        return self._with(redirect_standard_output=redirect)

    def set_redirect_standard_error(self, redirect: bool = True) -> ProcessBuilder:
        return self._with(redirect_standard_error=redirect)

    def set_redirect_outputs(self, redirect: bool = True) -> ProcessBuilder:
        return self.set_redirect_standard_output(redirect).set_redirect_standard_error(redirect)

    def set_output_forwarder(self, forwarder: OutputForwarder) -> ProcessBuilder:
        """Configure the forwarder used by wait_for_exit and wait_for_success."""
        return self._with(output_forwarder=forwarder)

    # ------------------------------------------------------------------
    # Terminal actions
    # ------------------------------------------------------------------

    def start(self) -> subprocess.Popen[str]:
        """Start the process and return it without waiting.

        The caller owns the returned handle; use it as a context manager to
        release it.

        Raises:
            SpawnError: If the program (or working directory) cannot be used
        """
        spec = self.spec
        try:
            process = subprocess.Popen(  # noqa: S603
                spec.argv,
                cwd=spec.working_directory,
                stdout=subprocess.PIPE if spec.redirect_standard_output else None,
                stderr=subprocess.PIPE if spec.redirect_standard_error else None,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.debug(f"Failed to start process command={self} error={e}")
            raise SpawnError(spec.program, spec.arguments, str(e)) from e

        logger.debug(
            f"Started process pid={process.pid} "
            f"program={spec.program} cwd={spec.working_directory or '<inherited>'}"
        )
        if get_config().log_commands:
            logger.info(f"Started process pid={process.pid}: {self}")
        return process

    def wait_for_exit(self, forwarder: OutputForwarder | None = None) -> int:
        """Run the process and wait for it to exit, ignoring the exit code.

        Args:
            forwarder: Forwarder to use instead of the configured one

        Returns:
            The exit code
        """
        return self._run_and_wait(forwarder)

    def wait_for_success(self, forwarder: OutputForwarder | None = None) -> None:
        """Run the process and wait for it to exit successfully.

        Args:
            forwarder: Forwarder to use instead of the configured one

        Raises:
            ExitCodeError: When the process exits with a non-zero exit code
        """
        self._validate_exit_code(self._run_and_wait(forwarder))

    def run_and_capture_output(self) -> str:
        """Run the process and return its standard output.

        Any configured output forwarder is not used.

        Raises:
            ExitCodeError: When the process exits with a non-zero exit code
        """
        with self.set_redirect_standard_output().start() as process:
            output, _ = process.communicate()
        self._log_exit(process)
        self._validate_exit_code(process.returncode)
        return output

    def _run_and_wait(self, forwarder: OutputForwarder | None) -> int:
        effective = forwarder if forwarder is not None else self.spec.output_forwarder
        builder = self.set_redirect_outputs() if effective is not None else self

        with builder.start() as process:
            if effective is not None:
                drain_output(process, effective)
                process.wait()
            else:
                # Reads (and discards) any redirected stream so a full pipe cannot block the child.
                process.communicate()

        self._log_exit(process)
        return process.returncode

    def _log_exit(self, process: subprocess.Popen[str]) -> None:
        logger.debug(f"Process exited pid={process.pid} returncode={process.returncode}")

    def _validate_exit_code(self, exit_code: int) -> None:
        if exit_code != 0:
            logger.warning(f"Process '{self}' exited with non-zero exit code: {exit_code}")
            raise ExitCodeError(self.spec.program, " ".join(self.spec.arguments), exit_code)

    def __str__(self) -> str:
        return " ".join(self.spec.argv)


def create(program: PathArg) -> ProcessBuilder:
    """Create a new ProcessBuilder for the provided program."""
    return ProcessBuilder.create(program)


def dotnet() -> ProcessBuilder:
    """A ProcessBuilder for the dotnet executable.

    Respects the DOTNET_HOST_PATH environment variable, read on every call.
    """
    return ProcessBuilder.create(load_config().dotnet_executable)
