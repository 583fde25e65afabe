"""Directory planner: the ordered scaffolding plan for a project.

The plan is computed without touching the filesystem. Its group order is a
hard contract: every group may assume the groups before it have completed
(for example, backend file writes assume ``backend/`` exists and that
``prisma init`` has run).
"""

from __future__ import annotations

from ..config import DEFAULT_COMMIT_MESSAGE, ToolConfig
from .models import CommandStep, FilePlanEntry, PlanGroup, ProjectSpec, ScaffoldPlan, ScaffoldState


BACKEND_DEPENDENCIES: tuple[str, ...] = (
    "express",
    "@types/express",
    "typescript",
    "ts-node",
    "nodemon",
    "prisma",
    "@prisma/client",
    "dotenv",
    "node-cron",
)
BACKEND_DEV_DEPENDENCIES: tuple[str, ...] = ("@types/node", "concurrently")

FRONTEND_DEPENDENCIES: tuple[str, ...] = (
    "@hero-ui/react",
    "@hero-ui/theme",
    "tailwindcss",
    "postcss",
    "autoprefixer",
)
FRONTEND_DEV_DEPENDENCIES: tuple[str, ...] = ("@types/node",)

CREATE_NEXT_APP_ARGS: tuple[str, ...] = (
    "create-next-app@latest",
    "frontend",
    "--typescript",
    "--eslint",
    "--app",
    "--src-dir",
    "--import-alias",
    "@/*",
    "--use-pnpm",
    "--yes",
)

BACKEND_FILES: tuple[str, ...] = (
    "backend/package.json",
    "backend/tsconfig.json",
    "backend/prisma/schema.prisma",
    "backend/src/app.ts",
    "backend/Dockerfile",
)
FRONTEND_FILES: tuple[str, ...] = (
    "frontend/tailwind.config.js",
    "frontend/src/app/globals.css",
    "frontend/src/app/page.tsx",
)
ROOT_FILES: tuple[str, ...] = ("docker-compose.yml", ".env.example")


class DirectoryPlanner:
    """Builds the ``ScaffoldPlan`` for a ``ProjectSpec``."""

    def __init__(
        self,
        tools: ToolConfig | None = None,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
    ) -> None:
        self.tools = tools or ToolConfig()
        self.commit_message = commit_message

    def plan(self, spec: ProjectSpec) -> ScaffoldPlan:
        """Return the ordered plan for *spec*."""
        groups = (
            PlanGroup(
                stage=ScaffoldState.CREATING_DIRS,
                directories=(".", "backend", "frontend"),
            ),
            PlanGroup(
                stage=ScaffoldState.RUNNING_BACKEND_TOOLS,
                commands=self._backend_commands(),
            ),
            PlanGroup(
                stage=ScaffoldState.WRITING_BACKEND_FILES,
                files=_file_entries(BACKEND_FILES),
            ),
            PlanGroup(
                stage=ScaffoldState.RUNNING_FRONTEND_TOOLS,
                commands=self._frontend_commands(),
            ),
            PlanGroup(
                stage=ScaffoldState.WRITING_FRONTEND_FILES,
                files=_file_entries(FRONTEND_FILES),
            ),
            PlanGroup(
                stage=ScaffoldState.WRITING_ROOT_FILES,
                files=_file_entries(ROOT_FILES),
            ),
            PlanGroup(
                stage=ScaffoldState.INITIALIZING_VCS,
                commands=self._vcs_commands(),
            ),
        )
        return ScaffoldPlan(spec=spec, groups=groups)

    # -- Command groups ----------------------------------------------------

    def _backend_commands(self) -> tuple[CommandStep, ...]:
        pnpm, npx = self.tools.pnpm, self.tools.npx
        return (
            CommandStep("backend", pnpm, ("init",)),
            CommandStep("backend", pnpm, ("add", *BACKEND_DEPENDENCIES)),
            CommandStep("backend", pnpm, ("add", "-D", *BACKEND_DEV_DEPENDENCIES)),
            CommandStep("backend", npx, ("prisma", "init", "--datasource-provider", "postgresql")),
        )

    def _frontend_commands(self) -> tuple[CommandStep, ...]:
        pnpm, npx = self.tools.pnpm, self.tools.npx
        return (
            CommandStep(".", npx, ("--yes", *CREATE_NEXT_APP_ARGS)),
            CommandStep("frontend", pnpm, ("add", *FRONTEND_DEPENDENCIES)),
            CommandStep("frontend", pnpm, ("add", "-D", *FRONTEND_DEV_DEPENDENCIES)),
            CommandStep("frontend", npx, ("tailwindcss", "init", "-p")),
        )

    def _vcs_commands(self) -> tuple[CommandStep, ...]:
        git = self.tools.git
        return (
            CommandStep(".", git, ("init",)),
            CommandStep(".", git, ("add", ".")),
            CommandStep(".", git, ("commit", "-m", self.commit_message)),
        )


def _file_entries(template_ids: tuple[str, ...]) -> tuple[FilePlanEntry, ...]:
    return tuple(FilePlanEntry(target_path=tid, template_id=tid) for tid in template_ids)
