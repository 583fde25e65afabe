"""stackseed command line interface.

Scaffolds a Next.js + HeroUI frontend and an Express + Prisma + Postgres
backend wired together with Docker Compose.

Usage::

    stackseed my-app
    stackseed my-app --output ./projects --force
    stackseed my-app --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import Config
from .scaffolder import (
    InvalidProjectNameError,
    ProjectSpec,
    ScaffoldOrchestrator,
    ScaffoldPlan,
)
from .utils import console, format_duration, print_error, print_success, print_summary_table


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class _ArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that reports usage errors with exit code 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="stackseed",
        description=(
            "Scaffold a Next.js + HeroUI frontend and an Express + Prisma + Postgres "
            "backend with Docker Compose."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Prerequisites: Node.js v20+, pnpm (npm i -g pnpm), Docker & Docker Compose\n"
            "\n"
            "Examples:\n"
            "  stackseed my-app\n"
            "  stackseed my-app -o ./projects --force\n"
        ),
    )
    parser.add_argument(
        "names",
        nargs="*",
        metavar="project_name",
        help="Name of the project directory to create",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Parent directory for the project (default: current directory)",
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Scaffold into an existing non-empty directory, overwriting files",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the plan without creating anything",
    )
    parser.add_argument(
        "--skip-prerequisite-check",
        action="store_true",
        help="Do not warn about missing pnpm/npx/git executables",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _build_config(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    updates: dict[str, object] = {}
    if args.output is not None:
        updates["output_dir"] = args.output
    if args.force:
        updates["on_existing"] = "overwrite"
    if args.skip_prerequisite_check:
        updates["check_prerequisites"] = False
    return config.model_copy(update=updates)


def _print_plan(plan: ScaffoldPlan, root: Path) -> None:
    table = Table(title=f"Plan for {root}", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Stage", no_wrap=True)
    table.add_column("Action")

    for index, group in enumerate(plan.groups, start=1):
        label = group.stage.value
        for directory in group.directories:
            table.add_row(str(index), label, escape(f"mkdir {directory}"))
        for step in group.commands:
            table.add_row(str(index), label, escape(f"[{step.working_dir}] {step.display()}"))
        for entry in group.files:
            table.add_row(str(index), label, escape(f"write {entry.target_path}"))

    console.print(table)


def _print_next_steps(name: str) -> None:
    console.print(
        Panel(
            f"cd {name}, cp .env.example .env and fill it, docker-compose up --build\n"
            "For dev: cd backend, npm run dev; cd frontend, pnpm dev\n"
            "Build frontend: cd frontend, pnpm build; then serve via backend.",
            title="Next steps",
            border_style="green",
        )
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.names) != 1:
        parser.print_usage(sys.stderr)
        print_error("Usage: stackseed <project_name>")
        return EXIT_FAILURE

    try:
        spec = ProjectSpec.from_name(args.names[0])
    except InvalidProjectNameError as exc:
        print_error(f"Error: {exc}")
        return EXIT_FAILURE

    try:
        config = _build_config(args)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        print_error(f"Invalid configuration: {field}: {error['msg']}")
        return EXIT_FAILURE

    orchestrator = ScaffoldOrchestrator(config)

    if args.dry_run:
        _print_plan(orchestrator.plan(spec), config.project_root(spec.name))
        return EXIT_OK

    try:
        result = asyncio.run(orchestrator.run(spec))
    except KeyboardInterrupt:
        print_error("Interrupted; the project directory was left as-is.")
        return EXIT_INTERRUPTED

    if not result.success:
        stage = result.failed_stage.value if result.failed_stage else "start"
        print_error(f"Scaffolding failed during {stage}: {result.message}")
        if result.captured_output:
            console.print(escape(result.captured_output), style="dim", highlight=False)
        print_summary_table(result.summary(), title="Scaffold Result")
        return EXIT_FAILURE

    print_summary_table(result.summary(), title="Scaffold Result")
    print_success(
        f"Project '{spec.name}' created in {format_duration(result.duration_seconds)}!"
    )
    _print_next_steps(spec.name)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
