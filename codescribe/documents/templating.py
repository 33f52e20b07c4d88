"""Jinja2 environment shared by the document generators and exporters."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(
    templates_dir: Path | None = None,
    *,
    autoescape: bool = False,
) -> Environment:
    """Build an environment that prefers ``templates_dir`` over the bundled templates."""
    directories: Sequence[Path] = [templates_dir, TEMPLATES_DIR] if templates_dir else [TEMPLATES_DIR]
    ordered: list[str] = []
    for directory in directories:
        if str(directory) not in ordered:
            ordered.append(str(directory))
    return Environment(
        loader=FileSystemLoader(ordered),
        autoescape=autoescape,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_section(env: Environment, name: str, title: str, body: str, metadata: Dict[str, object]) -> str:
    """Render a section through ``sections/<name>.j2`` or the shared default wrapper."""
    try:
        template = env.get_template(f"sections/{name}.j2")
    except TemplateNotFound:
        template = env.get_template("sections/default.j2")
    return template.render(name=name, title=title, body=body.strip(), metadata=metadata).strip()


__all__ = ["TEMPLATES_DIR", "create_environment", "render_section"]
