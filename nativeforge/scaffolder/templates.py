"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads templates from the
``nativeforge/scaffolder/templates/`` directory.  Rendering is a single pass
over a context mapping with ``StrictUndefined``: a placeholder without a value
is an error, and substituted values are never re-scanned for placeholders.
Verbatim assets (the sample programs) are read without rendering.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    ``.j2`` files are rendered with a context dictionary holding the project
    facts (name, language identifiers, extension, standard block).  Files
    without the suffix are static assets returned byte-for-byte by
    :meth:`read_static`.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"CMakeLists.txt.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            jinja2.UndefinedError: If the template references a missing key.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def read_static(self, asset_path: str) -> str:
        """Return the raw contents of a non-template asset."""
        return (self.template_dir / asset_path).read_text(encoding="utf-8")
