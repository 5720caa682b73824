"""Template rendering for Folio.

Listing pages are rendered from Jinja2 templates. Folio ships a default
``listing_page.md.jinja``; a project overrides it by placing a template of
the same name in its templates directory, which is searched first.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

# Templates bundled with the package
_TEMPLATES_DIR = Path(__file__).parent / "templates"

LISTING_TEMPLATE = "listing_page.md.jinja"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        search_path: Directories searched for templates, in order.
        env: Jinja2 environment.
    """

    def __init__(self, templates_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            templates_dir: Optional project directory with template overrides.
        """
        self.search_path = [_TEMPLATES_DIR]
        if templates_dir is not None and templates_dir.is_dir():
            self.search_path.insert(0, templates_dir)
        self.env = Environment(
            loader=FileSystemLoader([str(p) for p in self.search_path]),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def render(self, name: str, context: dict[str, Any]) -> str:
        """Render a named template.

        Args:
            name: Template filename.
            context: Variables to make available in the template.

        Returns:
            Rendered text, stripped and ending with a single newline.
        """
        template = self.env.get_template(name)
        return template.render(**context).strip() + "\n"
