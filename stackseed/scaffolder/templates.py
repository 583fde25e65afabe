"""Jinja2 template registry for project scaffolding.

Provides the ``TemplateRegistry`` class which loads the ``.j2`` files shipped
in ``stackseed/scaffolder/templates/`` once, checks at construction time that
every placeholder they use can be filled from a ``ProjectSpec``, and renders
them by template id.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound, meta

from .models import CONTEXT_KEYS, ErrorKind, ProjectSpec, ScaffoldError, Template


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Template id (== path inside the generated project) -> source file.
# ``.env.example`` is stored without its leading dot so it ships as package data.
TEMPLATE_SOURCES: dict[str, str] = {
    "backend/package.json": "backend/package.json.j2",
    "backend/tsconfig.json": "backend/tsconfig.json.j2",
    "backend/prisma/schema.prisma": "backend/prisma/schema.prisma.j2",
    "backend/src/app.ts": "backend/src/app.ts.j2",
    "backend/Dockerfile": "backend/Dockerfile.j2",
    "frontend/tailwind.config.js": "frontend/tailwind.config.js.j2",
    "frontend/src/app/globals.css": "frontend/src/app/globals.css.j2",
    "frontend/src/app/page.tsx": "frontend/src/app/page.tsx.j2",
    "docker-compose.yml": "docker-compose.yml.j2",
    ".env.example": "env.example.j2",
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class UnknownTemplateError(ScaffoldError, KeyError):
    """Raised when rendering a template id that was never registered."""

    kind = ErrorKind.UNKNOWN_TEMPLATE

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown template: '{template_id}'")

    def __str__(self) -> str:
        return self.args[0]


class TemplateRegistrationError(RuntimeError):
    """Raised when a registered template is missing or uses an unknown placeholder.

    This is an internal-consistency fault in the packaged templates, detected
    when the registry is built rather than part-way through a run.
    """


# ---------------------------------------------------------------------------
# TemplateRegistry
# ---------------------------------------------------------------------------


class TemplateRegistry:
    """Holds the named file templates and renders them for a ``ProjectSpec``.

    Templates are read once at construction; the registry never mutates them
    afterwards, so rendering is a pure function of ``(template_id, spec)``.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        sources: dict[str, str] | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._templates: dict[str, Template] = {}
        for template_id, source in (sources or TEMPLATE_SOURCES).items():
            self._register(template_id, source)

    # -- Registration ------------------------------------------------------

    def _register(self, template_id: str, source: str) -> None:
        try:
            body, _, _ = self.env.loader.get_source(self.env, source)
        except TemplateNotFound as exc:
            raise TemplateRegistrationError(
                f"Template '{template_id}' has no source file '{source}' "
                f"in {self.template_dir}"
            ) from exc

        placeholders = meta.find_undeclared_variables(self.env.parse(body))
        unknown = sorted(placeholders - CONTEXT_KEYS)
        if unknown:
            raise TemplateRegistrationError(
                f"Template '{template_id}' uses unknown placeholder(s): {', '.join(unknown)}"
            )

        self._templates[template_id] = Template(
            id=template_id,
            relative_path=template_id,
            body=body,
        )

    # -- Lookup ------------------------------------------------------------

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def ids(self) -> list[str]:
        """Return every registered template id in registration order."""
        return list(self._templates)

    def get(self, template_id: str) -> Template:
        try:
            return self._templates[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    # -- Rendering ---------------------------------------------------------

    def render(self, template_id: str, spec: ProjectSpec) -> str:
        """Render the template registered as *template_id* for *spec*.

        Raises:
            UnknownTemplateError: If *template_id* is not registered.
        """
        template = self.get(template_id)
        return self.env.from_string(template.body).render(**spec.context())
