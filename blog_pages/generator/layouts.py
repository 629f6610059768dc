"""Resolve named layouts and wrap rendered bodies in them.

Layouts are Jinja2 templates stored as ``<name>.jinja`` (or ``<name>.html``)
inside a layouts directory. A layout receives the rendered body in its
``content`` variable alongside the document's front matter as ``page``, the
resolved ``title``, the ``site`` metadata block, and ``pygments_css``. Layouts
can build on one another with ``{% extends %}``.

Example
-------
>>> from pathlib import Path
>>> from blog_pages.generator.layouts import LayoutRegistry
>>> registry = LayoutRegistry()
>>> html = registry.compose("<h1>Hello</h1>", "default", title="Hello")
>>> "<h1>Hello</h1>" in html
True
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)
from markupsafe import Markup

from blog_pages._constants import LAYOUT_SUFFIXES

if typ.TYPE_CHECKING:
    from jinja2 import Template

DEFAULT_LAYOUTS_DIR = Path(__file__).resolve().parents[1] / "templates"


class LayoutError(Exception):
    """Base class for layouts that cannot be used to render a document."""


class LayoutNotFoundError(LayoutError, LookupError):
    """Raised when a document names a layout the registry cannot resolve.

    ``required_by`` is set when the missing template is the parent of a
    layout that exists (``{% extends %}`` or ``{% include %}``).
    """

    def __init__(
        self,
        name: str,
        search_path: Path | None = None,
        *,
        required_by: str | None = None,
    ) -> None:
        self.name = name
        self.search_path = search_path
        self.required_by = required_by
        location = f" in '{search_path}'" if search_path else ""
        parent = f" (required by layout '{required_by}')" if required_by else ""
        super().__init__(f"Layout '{name}'{parent} not found{location}.")


class InvalidLayoutError(LayoutError, ValueError):
    """Raised when a layout fails to compile or to render."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Layout '{name}' is invalid: {reason}")


def _describe(exc: TemplateError) -> str:
    if isinstance(exc, TemplateSyntaxError):
        where = exc.filename or exc.name or "template"
        return f"{exc.message} ({where}, line {exc.lineno})"
    return str(exc)


class LayoutRegistry:
    """Look up layouts by name from a directory of Jinja templates."""

    def __init__(self, layouts_dir: Path | None = None) -> None:
        """Initialize the registry and its Jinja environment.

        Parameters
        ----------
        layouts_dir : Path, optional
            Directory holding layout templates. Defaults to the layouts bundled
            with ``blog_pages``.
        """
        self.layouts_dir = layouts_dir or DEFAULT_LAYOUTS_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.layouts_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def resolve(self, name: str) -> Template:
        """Return the compiled template registered under ``name``.

        Raises
        ------
        LayoutNotFoundError
            If no ``<name>.jinja`` or ``<name>.html`` template exists.
        InvalidLayoutError
            If the template exists but does not compile.
        """
        candidates = [f"{name}{suffix}" for suffix in LAYOUT_SUFFIXES]
        try:
            return self.env.select_template(candidates)
        except TemplateNotFound as exc:
            raise LayoutNotFoundError(name, self.layouts_dir) from exc
        except TemplateError as exc:
            raise InvalidLayoutError(name, _describe(exc)) from exc

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.resolve(name)
        except LayoutNotFoundError:
            return False
        return True

    def compose(self, content: str, layout: str, **context: typ.Any) -> str:  # noqa: ANN401
        """Substitute ``content`` into the named layout's content slot.

        Parameters
        ----------
        content : str
            Rendered HTML body; inserted without escaping.
        layout : str
            Layout name, usually taken from front matter.
        **context : Any
            Extra template variables (``page``, ``title``, ``site`` ...).

        Returns
        -------
        str
            The full page, always newline terminated.

        Raises
        ------
        LayoutNotFoundError
            If the layout, or a template it extends or includes, is missing.
        InvalidLayoutError
            If the layout or one of its parents fails to compile or render.
        """
        template = self.resolve(layout)
        context.setdefault("page", {})
        context.setdefault("site", {})
        context.setdefault("title", "")
        context.setdefault("pygments_css", "")
        try:
            html = template.render(content=Markup(content), **context)
        except TemplateNotFound as exc:
            raise LayoutNotFoundError(
                exc.name or str(exc), self.layouts_dir, required_by=layout
            ) from exc
        except TemplateError as exc:
            raise InvalidLayoutError(layout, _describe(exc)) from exc
        if not html.endswith("\n"):
            html += "\n"
        return html


__all__ = [
    "DEFAULT_LAYOUTS_DIR",
    "InvalidLayoutError",
    "LayoutError",
    "LayoutNotFoundError",
    "LayoutRegistry",
]
