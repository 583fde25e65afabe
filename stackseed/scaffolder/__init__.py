"""stackseed scaffolder -- generates full-stack project skeletons.

This package plans, renders and executes the scaffolding of a Next.js +
HeroUI frontend and an Express + Prisma + Postgres backend with Docker
Compose, then commits the result to a fresh git repository.

Quick usage::

    from stackseed.scaffolder import ProjectSpec, ScaffoldOrchestrator

    spec = ProjectSpec.from_name("my-app")
    result = await ScaffoldOrchestrator().run(spec)
    assert result.success
"""

from stackseed.scaffolder.models import (
    CommandStep,
    ErrorKind,
    FilePlanEntry,
    InvalidProjectNameError,
    PlanGroup,
    ProjectSpec,
    ScaffoldError,
    ScaffoldPlan,
    ScaffoldResult,
    ScaffoldState,
    Template,
)
from stackseed.scaffolder.orchestrator import ScaffoldOrchestrator
from stackseed.scaffolder.planner import DirectoryPlanner
from stackseed.scaffolder.runner import CommandFailedError, CommandOutcome, CommandRunner
from stackseed.scaffolder.templates import (
    TemplateRegistrationError,
    TemplateRegistry,
    UnknownTemplateError,
)

__all__ = [
    "CommandFailedError",
    "CommandOutcome",
    "CommandRunner",
    "CommandStep",
    "DirectoryPlanner",
    "ErrorKind",
    "FilePlanEntry",
    "InvalidProjectNameError",
    "PlanGroup",
    "ProjectSpec",
    "ScaffoldError",
    "ScaffoldOrchestrator",
    "ScaffoldPlan",
    "ScaffoldResult",
    "ScaffoldState",
    "Template",
    "TemplateRegistrationError",
    "TemplateRegistry",
    "UnknownTemplateError",
]
