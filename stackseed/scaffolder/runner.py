"""External tool invocation for the scaffolder.

Runs one ``CommandStep`` at a time with ``asyncio.create_subprocess_exec``,
captures its output, and classifies the result purely on the exit code.
Children get no stdin, so a tool that prompts reads EOF instead of waiting
on a pipe nobody sees. There is no timeout: a hung tool blocks the run until
it is cancelled.
"""

from __future__ import annotations

import asyncio
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .models import CommandStep, ErrorKind, ScaffoldError


# Exit codes reported when the executable cannot be started at all,
# matching what a POSIX shell reports.
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126


@dataclass
class CommandOutcome:
    """Exit status and captured output of one command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class CommandFailedError(ScaffoldError):
    """Raised when a ``must_succeed`` command exits with a non-zero status."""

    kind = ErrorKind.COMMAND_FAILED

    def __init__(self, step: CommandStep, exit_code: int, captured_output: str = ""):
        self.step = step
        self.exit_code = exit_code
        self.captured_output = captured_output
        super().__init__(
            f"Command failed (exit {exit_code}) in '{step.working_dir}': {step.display()}"
        )


class CommandExecutor(Protocol):
    """Anything that can execute a ``CommandStep`` (the runner, or a test fake)."""

    async def run(self, step: CommandStep, project_root: Path) -> CommandOutcome:
        ...


class CommandRunner:
    """Runs external tools for the scaffolder, one at a time."""

    async def run(self, step: CommandStep, project_root: Path) -> CommandOutcome:
        """Execute *step* inside ``project_root / step.working_dir``.

        Returns:
            The ``CommandOutcome`` (also for tolerated failures when
            ``step.must_succeed`` is false).

        Raises:
            CommandFailedError: If ``step.must_succeed`` and the command could
                not be started or exited non-zero.
        """
        cwd = project_root / step.working_dir
        start_time = time.monotonic()

        if not cwd.is_dir():
            outcome = CommandOutcome(
                exit_code=EXIT_NOT_FOUND,
                stderr=f"Working directory not found: '{step.working_dir}' ({cwd}).",
            )
            return self._classify(step, outcome)

        try:
            process = await asyncio.create_subprocess_exec(
                *step.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
            )
        except FileNotFoundError:
            outcome = CommandOutcome(
                exit_code=EXIT_NOT_FOUND,
                stderr=f"Executable not found: '{step.executable}'. Is it installed and in PATH?",
            )
            return self._classify(step, outcome)
        except PermissionError:
            outcome = CommandOutcome(
                exit_code=EXIT_NOT_EXECUTABLE,
                stderr=f"Permission denied executing: '{step.executable}'.",
            )
            return self._classify(step, outcome)

        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        outcome = CommandOutcome(
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=(stdout_bytes or b"").decode("utf-8", errors="replace").strip(),
            stderr=(stderr_bytes or b"").decode("utf-8", errors="replace").strip(),
            duration_seconds=time.monotonic() - start_time,
        )
        return self._classify(step, outcome)

    @staticmethod
    def _classify(step: CommandStep, outcome: CommandOutcome) -> CommandOutcome:
        if step.must_succeed and not outcome.ok:
            raise CommandFailedError(step, outcome.exit_code, outcome.output)
        return outcome


def which(executable: str) -> str | None:
    """Return the resolved path of *executable*, or ``None`` if not on PATH."""
    return shutil.which(executable)
