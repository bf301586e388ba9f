"""Standalone HTML rendering of the report view."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


def emphasis(text: str) -> Markup:
    """Escape text and render ``**bold**`` spans as <strong>."""
    parts = str(escape(text or "")).split("**")
    return Markup(
        "".join(
            f"<strong>{part}</strong>" if index % 2 == 1 else part
            for index, part in enumerate(parts)
        )
    )


jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
jinja_env.filters["emphasis"] = emphasis


def render_html(view: dict[str, Any]) -> str:
    """Render the report view as a self-contained HTML page."""
    return jinja_env.get_template("report.html.j2").render(report=view)
