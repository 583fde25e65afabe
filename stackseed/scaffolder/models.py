"""Data model for the stackseed scaffolding engine.

Defines the validated project input (``ProjectSpec``), the immutable plan
structures produced by the planner (``FilePlanEntry``, ``CommandStep``,
``PlanGroup``, ``ScaffoldPlan``), the orchestrator states, and the structured
``ScaffoldResult`` returned at the end of a run.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ScaffoldState(str, Enum):
    """Orchestrator states, in execution order."""
    START = "start"
    CREATING_DIRS = "creating_dirs"
    RUNNING_BACKEND_TOOLS = "running_backend_tools"
    WRITING_BACKEND_FILES = "writing_backend_files"
    RUNNING_FRONTEND_TOOLS = "running_frontend_tools"
    WRITING_FRONTEND_FILES = "writing_frontend_files"
    WRITING_ROOT_FILES = "writing_root_files"
    INITIALIZING_VCS = "initializing_vcs"
    DONE = "done"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Classification of fatal scaffolding errors."""
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN_TEMPLATE = "unknown_template"
    COMMAND_FAILED = "command_failed"
    FILESYSTEM_ERROR = "filesystem_error"
    TARGET_NOT_EMPTY = "target_not_empty"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ScaffoldError(Exception):
    """Base class for errors raised by the scaffolding engine."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, kind: ErrorKind | None = None):
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class InvalidProjectNameError(ScaffoldError, ValueError):
    """Raised when a project name is empty or not filesystem-safe."""

    kind = ErrorKind.INVALID_ARGUMENT


# ---------------------------------------------------------------------------
# Project input
# ---------------------------------------------------------------------------

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_MAX_NAME_LENGTH = 214  # npm package name limit


def validate_project_name(name: str) -> str:
    """Return *name* unchanged if it is a usable project name.

    The name becomes a directory name, part of an npm package name and part
    of a database name, so only a conservative character set is accepted.

    Raises:
        InvalidProjectNameError: If the name is empty, too long, contains a
            path separator or whitespace, or is a relative path component.
    """
    if not name:
        raise InvalidProjectNameError("Project name must not be empty.")
    if name in (".", ".."):
        raise InvalidProjectNameError(f"Project name '{name}' is not a valid directory name.")
    if "/" in name or "\\" in name:
        raise InvalidProjectNameError(
            f"Project name '{name}' must not contain path separators."
        )
    if len(name) > _MAX_NAME_LENGTH:
        raise InvalidProjectNameError(
            f"Project name is too long ({len(name)} > {_MAX_NAME_LENGTH} characters)."
        )
    if not _NAME_PATTERN.match(name):
        raise InvalidProjectNameError(
            f"Project name '{name}' may only contain letters, digits, '.', '_' and '-', "
            "and must start with a letter or digit."
        )
    return name


class ProjectSpec(BaseModel):
    """Immutable description of the project being scaffolded.

    Every derived value is a pure function of ``name`` so that the name is
    interpolated verbatim everywhere it appears.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name, used as the root directory name")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_project_name(value)

    @classmethod
    def from_name(cls, name: str) -> "ProjectSpec":
        """Validate *name* and build a spec, raising ``InvalidProjectNameError``.

        Pydantic would otherwise wrap the validator error in a
        ``ValidationError``; callers only need the domain error.
        """
        validate_project_name(name)
        return cls(name=name)

    @property
    def database_name(self) -> str:
        """Postgres database name written to ``.env.example``."""
        return f"{self.name}_db"

    @property
    def backend_package_name(self) -> str:
        """npm package name of the generated backend."""
        return f"{self.name}-backend"

    def context(self) -> dict[str, str]:
        """Return the template context exposed to every template."""
        return {
            "project_name": self.name,
            "database_name": self.database_name,
            "backend_package_name": self.backend_package_name,
        }


#: Placeholder names every template may reference.
CONTEXT_KEYS: frozenset[str] = frozenset(ProjectSpec(name="x").context())


# ---------------------------------------------------------------------------
# Plan structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Template:
    """A registered file template."""

    id: str
    relative_path: str
    body: str


@dataclass(frozen=True)
class FilePlanEntry:
    """One file to render and write, relative to the project root."""

    target_path: str
    template_id: str


@dataclass(frozen=True)
class CommandStep:
    """One external tool invocation.

    ``working_dir`` is relative to the project root (``"."`` for the root).
    """

    working_dir: str
    executable: str
    args: tuple[str, ...] = ()
    must_succeed: bool = True

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def display(self) -> str:
        """Return a shell-like rendering of the command for diagnostics."""
        parts = []
        for part in self.argv:
            if not part or any(ch in part for ch in " *\"'"):
                parts.append('"' + part.replace('"', '\\"') + '"')
            else:
                parts.append(part)
        return " ".join(parts)


@dataclass(frozen=True)
class PlanGroup:
    """A contiguous group of directories, commands or files for one state."""

    stage: ScaffoldState
    directories: tuple[str, ...] = ()
    commands: tuple[CommandStep, ...] = ()
    files: tuple[FilePlanEntry, ...] = ()

    def __post_init__(self) -> None:
        filled = sum(1 for part in (self.directories, self.commands, self.files) if part)
        if filled != 1:
            raise ValueError(
                f"Plan group '{self.stage.value}' must hold exactly one of "
                f"directories, commands or files (got {filled})"
            )

    @property
    def kind(self) -> str:
        if self.directories:
            return "directories"
        if self.commands:
            return "commands"
        return "files"


@dataclass(frozen=True)
class ScaffoldPlan:
    """The ordered plan for one project."""

    spec: ProjectSpec
    groups: tuple[PlanGroup, ...]

    def group_for(self, stage: ScaffoldState) -> PlanGroup:
        for group in self.groups:
            if group.stage is stage:
                return group
        raise KeyError(stage.value)

    def file_entries(self) -> list[FilePlanEntry]:
        return [entry for group in self.groups for entry in group.files]

    def command_steps(self) -> list[CommandStep]:
        return [step for group in self.groups for step in group.commands]

    def directories(self) -> list[str]:
        return [d for group in self.groups for d in group.directories]


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass
class ScaffoldResult:
    """Outcome of one orchestrator run."""

    project_root: Path
    created_paths: set[str] = field(default_factory=set)
    state: ScaffoldState = ScaffoldState.START
    failed_stage: Optional[ScaffoldState] = None
    failed_step: Optional[CommandStep] = None
    failed_path: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    captured_output: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.state is ScaffoldState.DONE and self.error is None

    def summary(self) -> dict[str, Any]:
        """Return a flat ``{label: value}`` mapping for console tables."""
        data: dict[str, Any] = {
            "Project root": str(self.project_root),
            "State": self.state.value,
            "Paths created": len(self.created_paths),
        }
        if self.error is not None:
            data["Error"] = self.error.value
            if self.failed_stage is not None:
                data["Failed stage"] = self.failed_stage.value
            if self.failed_step is not None:
                data["Failed command"] = self.failed_step.display()
            if self.failed_path is not None:
                data["Failed path"] = self.failed_path
        return data
