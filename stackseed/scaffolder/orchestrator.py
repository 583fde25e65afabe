"""Scaffold orchestrator.

Drives a ``ScaffoldPlan`` through a fixed sequence of states, one plan group
per state, and reports a structured ``ScaffoldResult``::

    start -> creating_dirs -> running_backend_tools -> writing_backend_files
          -> running_frontend_tools -> writing_frontend_files
          -> writing_root_files -> initializing_vcs -> done

Any fatal error moves the run to ``failed``; no further steps execute and
nothing already written is removed.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from ..config import Config
from ..utils import print_stage_header, print_step, print_warning
from .models import (
    ErrorKind,
    PlanGroup,
    ProjectSpec,
    ScaffoldPlan,
    ScaffoldResult,
    ScaffoldState,
)
from .planner import DirectoryPlanner
from .runner import CommandExecutor, CommandFailedError, CommandRunner, which
from .templates import TemplateRegistry, UnknownTemplateError


class PathEscapeError(OSError):
    """Raised when a planned path would resolve outside the project root."""


class ScaffoldOrchestrator:
    """Runs the scaffolding plan for one project.

    Attributes:
        config: Global configuration (output directory, overwrite policy,
            tool executables).
        registry: Template registry used to render every planned file.
        planner: Produces the ordered plan.
        runner: Executes command steps; replaceable by a fake in tests.
    """

    def __init__(
        self,
        config: Config | None = None,
        registry: TemplateRegistry | None = None,
        planner: DirectoryPlanner | None = None,
        runner: CommandExecutor | None = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or TemplateRegistry()
        self.planner = planner or DirectoryPlanner(
            tools=self.config.tools, commit_message=self.config.commit_message
        )
        self.runner: CommandExecutor = runner or CommandRunner()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def plan(self, spec: ProjectSpec) -> ScaffoldPlan:
        """Return the plan for *spec* without executing anything."""
        return self.planner.plan(spec)

    async def run(self, spec: ProjectSpec) -> ScaffoldResult:
        """Scaffold the project described by *spec*.

        Returns:
            The ``ScaffoldResult``; ``result.success`` is true only when the
            run reached ``done``.
        """
        started = time.monotonic()
        root = self.config.project_root(spec.name).resolve()
        result = ScaffoldResult(project_root=root)
        plan = self.plan(spec)

        try:
            target_ok = self._check_target(root, result)
        except OSError as exc:
            self._fail(
                result,
                ErrorKind.FILESYSTEM_ERROR,
                f"Cannot inspect target directory {root}: {exc}",
            )
            result.failed_path = "."
            target_ok = False

        if not target_ok:
            result.duration_seconds = time.monotonic() - started
            return result

        if self.config.check_prerequisites:
            self._warn_missing_tools(plan)

        for index, group in enumerate(plan.groups, start=1):
            result.state = group.stage
            print_stage_header(index, group.stage.value)
            try:
                await self._execute_group(group, plan, root, result)
            except CommandFailedError as exc:
                self._fail(result, ErrorKind.COMMAND_FAILED, str(exc))
                result.failed_step = exc.step
                result.captured_output = exc.captured_output
                break
            except UnknownTemplateError as exc:
                self._fail(result, ErrorKind.UNKNOWN_TEMPLATE, str(exc))
                break
            except OSError as exc:
                self._fail(result, ErrorKind.FILESYSTEM_ERROR, str(exc))
                break
            except asyncio.CancelledError:
                self._fail(result, ErrorKind.COMMAND_FAILED, "Cancelled")
                result.duration_seconds = time.monotonic() - started
                raise
        else:
            result.state = ScaffoldState.DONE

        result.duration_seconds = time.monotonic() - started
        return result

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def _check_target(self, root: Path, result: ScaffoldResult) -> bool:
        """Apply the configured policy for a pre-existing project directory."""
        if not root.exists():
            return True

        if not root.is_dir():
            self._fail(
                result,
                ErrorKind.FILESYSTEM_ERROR,
                f"Target path exists and is not a directory: {root}",
            )
            result.failed_path = "."
            return False

        if not any(root.iterdir()):
            return True

        if self.config.on_existing == "overwrite":
            print_warning(
                f"Directory {root} is not empty; existing files with the same "
                "names will be overwritten."
            )
            return True

        self._fail(
            result,
            ErrorKind.TARGET_NOT_EMPTY,
            f"Target directory is not empty: {root} (use --force to overwrite)",
        )
        result.failed_path = "."
        return False

    def _warn_missing_tools(self, plan: ScaffoldPlan) -> None:
        seen: set[str] = set()
        for step in plan.command_steps():
            if step.executable in seen:
                continue
            seen.add(step.executable)
            if which(step.executable) is None:
                print_warning(f"'{step.executable}' was not found in PATH.")

    # ------------------------------------------------------------------
    # Group execution
    # ------------------------------------------------------------------

    async def _execute_group(
        self,
        group: PlanGroup,
        plan: ScaffoldPlan,
        root: Path,
        result: ScaffoldResult,
    ) -> None:
        for directory in group.directories:
            result.failed_path = directory
            path = _resolve_inside(root, directory)
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            result.created_paths.add(directory)
            print_step(f"mkdir {directory}")

        for step in group.commands:
            result.failed_step = step
            print_step(f"[{step.working_dir}] {step.display()}")
            outcome = await self.runner.run(step, root)
            if not outcome.ok:
                print_warning(f"  exited {outcome.exit_code}, continuing")

        for entry in group.files:
            result.failed_path = entry.target_path
            content = self.registry.render(entry.template_id, plan.spec)
            path = _resolve_inside(root, entry.target_path)
            await asyncio.to_thread(_write_file, path, content)
            result.created_paths.add(entry.target_path)
            print_step(f"write {entry.target_path}")

        result.failed_step = None
        result.failed_path = None

    @staticmethod
    def _fail(result: ScaffoldResult, kind: ErrorKind, message: str) -> None:
        result.failed_stage = result.state
        result.state = ScaffoldState.FAILED
        result.error = kind
        result.message = message


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _resolve_inside(root: Path, relative: str) -> Path:
    """Join *relative* onto *root*, refusing anything that escapes it."""
    candidate = Path(relative)
    if candidate.is_absolute():
        raise PathEscapeError(f"Planned path must be relative: {relative}")
    resolved = (root / candidate).resolve()
    if resolved != root and root not in resolved.parents:
        raise PathEscapeError(f"Planned path escapes the project root: {relative}")
    return resolved


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
