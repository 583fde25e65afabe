"""stackseed configuration.

Centralised, typed configuration for the scaffolder. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


DEFAULT_COMMIT_MESSAGE = (
    "Initial generic project setup with Next.js + HeroUI, Express + Prisma + Postgres"
)


class ToolConfig(BaseModel):
    """Executables invoked while scaffolding.

    These are fixed by configuration and never derived from the project name.
    """

    pnpm: str = Field(default="pnpm", min_length=1)
    npx: str = Field(default="npx", min_length=1)
    git: str = Field(default="git", min_length=1)

    def as_dict(self) -> dict[str, str]:
        """Return a plain ``{tool: executable}`` mapping."""
        return {"pnpm": self.pnpm, "npx": self.npx, "git": self.git}


class Config(BaseModel):
    """Global stackseed configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the ``ScaffoldOrchestrator``.
    """

    output_dir: Path = Field(default=Path("."))
    on_existing: Literal["refuse", "overwrite"] = Field(
        default="refuse",
        description="What to do when the project directory already exists and is not empty",
    )
    check_prerequisites: bool = Field(
        default=True, description="Warn about tool executables missing from PATH"
    )
    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, min_length=1)
    tools: ToolConfig = Field(default_factory=ToolConfig)

    @field_validator("on_existing", mode="before")
    @classmethod
    def _normalise_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def project_root(self, project_name: str) -> Path:
        """Directory the project named *project_name* is generated into."""
        return self.output_dir / project_name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKSEED_OUTPUT_DIR, STACKSEED_ON_EXISTING,
            STACKSEED_CHECK_PREREQUISITES, STACKSEED_PNPM, STACKSEED_NPX,
            STACKSEED_GIT.
        """
        tool_kwargs: dict[str, Any] = {}
        for tool in ("pnpm", "npx", "git"):
            value = os.environ.get(f"STACKSEED_{tool.upper()}")
            if value:
                tool_kwargs[tool] = value

        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKSEED_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STACKSEED_OUTPUT_DIR"])
        if os.environ.get("STACKSEED_ON_EXISTING"):
            kwargs["on_existing"] = os.environ["STACKSEED_ON_EXISTING"]
        if os.environ.get("STACKSEED_CHECK_PREREQUISITES"):
            flag = os.environ["STACKSEED_CHECK_PREREQUISITES"].strip().lower()
            kwargs["check_prerequisites"] = flag not in ("0", "false", "no", "off")

        return cls(tools=ToolConfig(**tool_kwargs), **kwargs)
