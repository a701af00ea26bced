"""Markdown body rendering.

The markdown source is kept as the plain-text alternative and rendered to
HTML for the rich alternative.
"""

import logging
from dataclasses import dataclass

from jinja2 import Template, TemplateError  # type: ignore
from markdown_it import MarkdownIt

from .errors import ReadFailure
from .utils import validate_path, validate_template

logger = logging.getLogger(__name__)

# raw HTML in the source passes through unsanitized
MARKDOWN = MarkdownIt("commonmark")


@dataclass(frozen=True)
class RenderedBody:
    """Plain text and its HTML rendering. `plain_text` is authoritative."""

    plain_text: str
    html: str


def _read_text(path: str) -> str:
    file = validate_path(path)
    try:
        with open(file, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailure(path, e) from e


def render_markdown(text: str) -> str:
    """Renders markdown `text` to an HTML fragment."""
    return MARKDOWN.render(text)


def apply_template(template: str, content: str, **variables) -> str:
    """Injects rendered HTML into a Jinja2 layout as ``{{ content }}``.

    Args:
        template (str): Path to the HTML layout file.
        content (str): Rendered HTML fragment.
        **variables: Extra placeholders for the layout.

    Raises:
        InvalidTemplate: If the file is not an HTML template.
        FileNotFound: If the template does not exist.
        ReadFailure: If the template cannot be read or rendered.
    """
    source = validate_template(template)
    try:
        with open(source, "r", encoding="utf-8") as f:
            return Template(f.read()).render(content=content, **variables)
    except (OSError, UnicodeDecodeError, TemplateError) as e:
        raise ReadFailure(template, e) from e


def render_body(path: str, template: str | None = None, **variables) -> RenderedBody:
    """Reads a markdown file and renders it for both body alternatives.

    The file is validated before it is opened, then read fully as UTF-8.
    Rendering is deterministic, so the same file always yields the same body.

    Args:
        path (str): Path to the markdown source.
        template (str, optional): HTML layout that wraps the rendered markdown.
        **variables: Extra placeholders for `template`.

    Returns:
        RenderedBody: The untouched source text and its HTML rendering.

    Raises:
        FileNotFound: If `path` does not exist.
        NotAFile: If `path` is not a regular file.
        ReadFailure: If the file cannot be read or is not valid UTF-8.

    Example:
        body = render_body("notes/weekly.md")
        body.html  # '<h1>Weekly</h1>...'
    """
    plain = _read_text(path)
    html = render_markdown(plain)

    if template:
        html = apply_template(template, html, **variables)

    logger.debug("Rendered %s (%d chars of markdown).", path, len(plain))
    return RenderedBody(plain_text=plain, html=html)
