"""Synchronous execution of external processes with captured output."""

import logging
import signal
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProcessOutcome:
    """Exit code and captured streams of a finished process.

    stdout is None when it was not captured.
    """

    exit_code: int
    stdout: bytes | None
    stderr: str

    @property
    def success(self) -> bool:
        """Whether the process exited with status zero."""
        return self.exit_code == 0

    @property
    def exit_description(self) -> str:
        """Human-readable description of how the process exited."""
        return describe_exit(self.exit_code)


def describe_exit(exit_code: int) -> str:
    """Describe an exit code the way a shell user would read it.

    Negative codes come from subprocess for processes killed by a signal.
    """
    if exit_code < 0:
        try:
            name = signal.Signals(-exit_code).name
        except ValueError:
            name = str(-exit_code)
        return f"signal: {name}"
    return f"exit status {exit_code}"


def execute(
    executable: Path,
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str],
    capture_stdout: bool = False,
) -> ProcessOutcome:
    """Run a process to completion and capture its output.

    Args:
        executable: Program image to run
        args: Full argument vector; args[0] need not match executable
        cwd: Working directory of the child process
        env: Complete environment of the child process
        capture_stdout: Capture stdout instead of discarding it

    Returns:
        Exit code and captured streams

    Raises:
        OSError: If the process could not be started

    """
    log.debug("Executing %s as %s in %s", executable, list(args), cwd)

    completed = subprocess.run(
        list(args),
        executable=executable,
        cwd=cwd,
        env=dict(env),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        check=False,
    )

    log.debug("Process %s finished with exit code %d", args[0], completed.returncode)

    return ProcessOutcome(
        exit_code=completed.returncode,
        stdout=completed.stdout if capture_stdout else None,
        stderr=completed.stderr.decode(errors="replace"),
    )
