"""Render a Markdown blog into layout-wrapped static HTML pages.

This package splits front matter from each content file, renders the Markdown
body block by block, and composes the result into a named Jinja layout. It
exposes the CLI entry points used by ``pages build``.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from blog_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
