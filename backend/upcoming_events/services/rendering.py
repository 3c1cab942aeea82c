"""services/rendering.py — Template rendering for block fragments.

Wraps FastAPI's Jinja2Templates so the same environment serves both
TemplateResponse pages and plain HTML string fragments (event list items,
avatars) embedded in JSON.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from fastapi.templating import Jinja2Templates

from upcoming_events.core.config import settings
from upcoming_events.core.strings import get_string

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals["get_string"] = get_string


class Renderer:
    def __init__(self, templates: Jinja2Templates = templates, www_root: Optional[str] = None) -> None:
        self.templates = templates
        self.www_root = (www_root if www_root is not None else settings.www_root).rstrip("/")

    def render_from_template(self, name: str, context: Mapping[str, Any]) -> str:
        return self.templates.get_template(f"{name}.html").render(**context)

    def pix_url(self, path: str) -> str:
        """URL of a theme image, e.g. pix_url("u/f2")."""
        return f"{self.www_root}/pix/{path}.png"

    def url(self, path: str) -> str:
        return f"{self.www_root}/{path.lstrip('/')}"

    def render_user_picture(self, picture) -> str:
        return self.render_from_template("user_picture", picture.export_for_template(self))
