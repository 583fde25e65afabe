"""Shared pytest fixtures for the stackseed test suite.

Provides reusable fixtures for:
- Validated project specs
- Configurations pointing at temporary output directories
- A fake command runner that records steps instead of spawning tools
- Orchestrators wired to the fake runner
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from stackseed.config import Config
from stackseed.scaffolder import (
    CommandFailedError,
    CommandOutcome,
    CommandStep,
    ProjectSpec,
    ScaffoldOrchestrator,
    TemplateRegistry,
)


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Records every ``CommandStep`` and reports success unless told otherwise.

    Args:
        fail_on: Predicate selecting the step that should fail.
        exit_code: Exit code reported for the failing step.
        output: Captured output reported for the failing step.
    """

    def __init__(
        self,
        fail_on: Optional[Callable[[CommandStep], bool]] = None,
        exit_code: int = 1,
        output: str = "simulated failure",
    ) -> None:
        self.fail_on = fail_on
        self.exit_code = exit_code
        self.output = output
        self.calls: list[CommandStep] = []
        self.roots: list[Path] = []

    async def run(self, step: CommandStep, project_root: Path) -> CommandOutcome:
        self.calls.append(step)
        self.roots.append(project_root)
        if self.fail_on is not None and self.fail_on(step):
            if step.must_succeed:
                raise CommandFailedError(step, self.exit_code, self.output)
            return CommandOutcome(exit_code=self.exit_code, stderr=self.output)
        return CommandOutcome(exit_code=0)


def fails_on(executable_or_arg: str) -> Callable[[CommandStep], bool]:
    """Predicate matching steps whose argv contains *executable_or_arg*."""

    def _match(step: CommandStep) -> bool:
        return executable_or_arg in step.argv

    return _match


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_stackseed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``STACKSEED_*`` variables from the developer's shell out of tests."""
    for name in (
        "STACKSEED_OUTPUT_DIR",
        "STACKSEED_ON_EXISTING",
        "STACKSEED_CHECK_PREREQUISITES",
        "STACKSEED_PNPM",
        "STACKSEED_NPX",
        "STACKSEED_GIT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def demo_spec() -> ProjectSpec:
    """The ``demo`` project used throughout the examples."""
    return ProjectSpec.from_name("demo")


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry over the packaged templates."""
    return TemplateRegistry()


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory that projects are generated into (auto-cleanup)."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def config(output_dir: Path) -> Config:
    """Configuration writing into ``output_dir`` with PATH checks disabled."""
    return Config(output_dir=output_dir, check_prerequisites=False)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A runner that succeeds for every step."""
    return FakeRunner()


@pytest.fixture
def fake_runner_cls() -> type[FakeRunner]:
    """The ``FakeRunner`` class, for tests that need to build or patch one."""
    return FakeRunner


@pytest.fixture
def failing_on() -> Callable[[str], Callable[[CommandStep], bool]]:
    """Factory for ``FakeRunner(fail_on=...)`` predicates."""
    return fails_on


@pytest.fixture
def orchestrator(config: Config, registry: TemplateRegistry, fake_runner: FakeRunner) -> ScaffoldOrchestrator:
    """Orchestrator wired to the recording fake runner."""
    return ScaffoldOrchestrator(config, registry=registry, runner=fake_runner)
