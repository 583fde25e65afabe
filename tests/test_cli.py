"""Tests for the stackseed command line interface.

External tools are never spawned: the orchestrator's ``CommandRunner`` is
replaced by the recording ``FakeRunner`` from conftest.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from stackseed import __version__
from stackseed.cli import EXIT_FAILURE, EXIT_OK, build_parser, main


pytestmark = pytest.mark.unit


@pytest.fixture
def cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each CLI test from an empty temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch, fake_runner_cls):
    """Swap the real runner for a fake; returns the list of created runners."""
    created = []

    def install(**kwargs):
        def factory():
            runner = fake_runner_cls(**kwargs)
            created.append(runner)
            return runner

        monkeypatch.setattr("stackseed.scaffolder.orchestrator.CommandRunner", factory)
        return created

    return install


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------


class TestArguments:
    def test_no_arguments(self, cwd: Path, capsys):
        assert main([]) == EXIT_FAILURE
        assert "Usage: stackseed <project_name>" in capsys.readouterr().err
        assert list(cwd.iterdir()) == []

    def test_two_arguments(self, cwd: Path, capsys):
        assert main(["one", "two"]) == EXIT_FAILURE
        assert "Usage" in capsys.readouterr().err
        assert list(cwd.iterdir()) == []

    @pytest.mark.parametrize("name", ["../evil", "a/b", "my app", "."])
    def test_invalid_name(self, cwd: Path, name, capsys):
        assert main([name]) == EXIT_FAILURE
        assert "Error:" in capsys.readouterr().err
        assert list(cwd.iterdir()) == []

    def test_unknown_option_exits_with_one(self, cwd: Path):
        with pytest.raises(SystemExit) as excinfo:
            main(["demo", "--bogus"])
        assert excinfo.value.code == EXIT_FAILURE

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_bad_environment_value(self, cwd: Path, monkeypatch, capsys):
        monkeypatch.setenv("STACKSEED_ON_EXISTING", "bogus")

        assert main(["demo", "--dry-run"]) == EXIT_FAILURE

        err = capsys.readouterr().err
        assert "Invalid configuration" in err
        assert "on_existing" in err
        assert "Traceback" not in err
        assert list(cwd.iterdir()) == []

    def test_parser_defaults(self):
        args = build_parser().parse_args(["demo"])
        assert args.names == ["demo"]
        assert args.output is None
        assert args.force is False
        assert args.dry_run is False
        assert args.skip_prerequisite_check is False


# ---------------------------------------------------------------------------
# Dry run
# ---------------------------------------------------------------------------


class TestDryRun:
    def test_prints_plan_without_touching_disk(self, cwd: Path, capsys):
        assert main(["demo", "--dry-run"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "mkdir backend" in out
        assert "write .env.example" in out
        assert list(cwd.iterdir()) == []


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------


class TestRun:
    def test_success(self, cwd: Path, fake_tools, capsys):
        runners = fake_tools()

        code = main(["demo", "--skip-prerequisite-check"])

        assert code == EXIT_OK
        root = cwd / "demo"
        assert (root / "docker-compose.yml").is_file()
        assert (root / "backend" / "package.json").is_file()
        assert len(runners[0].calls) == 11
        out = capsys.readouterr().out
        assert "Next steps" in out
        assert "created" in out

    def test_output_option(self, cwd: Path, fake_tools, tmp_path: Path):
        fake_tools()
        target = tmp_path / "projects"

        assert main(["demo", "-o", str(target), "--skip-prerequisite-check"]) == EXIT_OK
        assert (target / "demo" / ".env.example").is_file()

    def test_output_from_environment(self, cwd: Path, fake_tools, tmp_path: Path, monkeypatch):
        fake_tools()
        target = tmp_path / "from-env"
        monkeypatch.setenv("STACKSEED_OUTPUT_DIR", str(target))

        assert main(["demo", "--skip-prerequisite-check"]) == EXIT_OK
        assert (target / "demo" / "frontend" / "src" / "app" / "page.tsx").is_file()

    def test_command_failure(self, cwd: Path, fake_tools, failing_on, capsys):
        fake_tools(fail_on=failing_on("commit"), output="fatal: no identity")

        assert main(["demo", "--skip-prerequisite-check"]) == EXIT_FAILURE

        captured = capsys.readouterr()
        assert "Scaffolding failed during" in captured.err
        assert "initializing_vcs" in captured.err
        assert "fatal: no identity" in captured.out
        assert (cwd / "demo" / "docker-compose.yml").is_file()

    def test_non_empty_target_refused(self, cwd: Path, fake_tools, capsys):
        runners = fake_tools()
        (cwd / "demo").mkdir()
        (cwd / "demo" / "notes.txt").write_text("keep", encoding="utf-8")

        assert main(["demo", "--skip-prerequisite-check"]) == EXIT_FAILURE
        assert "not empty" in capsys.readouterr().err
        assert runners[0].calls == []
        assert sorted(p.name for p in (cwd / "demo").iterdir()) == ["notes.txt"]

    def test_force_overwrites(self, cwd: Path, fake_tools):
        fake_tools()
        (cwd / "demo").mkdir()
        (cwd / "demo" / "notes.txt").write_text("keep", encoding="utf-8")

        assert main(["demo", "--force", "--skip-prerequisite-check"]) == EXIT_OK
        assert (cwd / "demo" / "notes.txt").is_file()
        assert (cwd / "demo" / "backend" / "Dockerfile").is_file()
