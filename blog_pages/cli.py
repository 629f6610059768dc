"""Cyclopts CLI entrypoint for building the blog from Markdown content.

The ``pages`` console script defined here renders every Markdown document in
the configured content directory into layout-wrapped HTML (``pages build``)
or previews a single document on stdout (``pages render``). Options can also
be supplied through ``INPUT_*`` environment variables so the same commands
run unchanged in CI.

Examples
--------
Build the whole site using ``site.yaml`` in the current directory:

>>> from blog_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory, including drafts:

>>> from blog_pages.cli import app
>>> app(["build", "--output-dir", "dist", "--drafts"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import SiteConfig, load_site_config
from .generator import Document, LayoutError, SiteBuilder

DEFAULT_CONFIG = Path("site.yaml")

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(help="Render every Markdown document into layout-wrapped HTML.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    drafts: typ.Annotated[
        bool,
        Parameter(help="Include documents marked as drafts", env_var="INPUT_DRAFTS"),
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log every rendered page")] = False,
) -> None:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    output_dir : Path or None, optional
        Override the configured output directory.
    drafts : bool, optional
        Render documents whose front matter marks them as drafts.
    verbose : bool, optional
        Emit debug logging for every page written or skipped.

    Returns
    -------
    None
        Writes rendered pages and prints one line per written or failed
        document.

    Raises
    ------
    SystemExit
        With status ``1`` when at least one document failed to render.
    """
    _configure_logging(verbose=verbose)
    site_config = load_site_config(config).with_overrides(
        output_dir=output_dir, include_drafts=drafts or None
    )
    report = SiteBuilder(site_config).run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for source in report.skipped:
        print(f"skipped draft {source}")
    for source, reason in report.failures.items():
        print(f"failed {source}: {reason}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


@app.command(help="Render a single Markdown document to stdout.")
def render(
    source: typ.Annotated[Path, Parameter(help="Markdown file to render")],
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    layout: typ.Annotated[
        str | None, Parameter(help="Override the front-matter layout")
    ] = None,
) -> None:
    """Render ``source`` through its layout and print the page.

    When ``config`` does not exist the bundled layouts and defaults are used,
    so a single file can be previewed outside a site checkout.
    """
    _configure_logging(verbose=False)
    if config.exists():
        site_config = load_site_config(config)
    else:
        site_config = SiteConfig(content_dir=source.parent, output_dir=Path("public"))
    document = Document.from_text(source.name, source.read_text(encoding="utf-8"))
    try:
        html = SiteBuilder(site_config).render_document(document, layout=layout)
    except LayoutError as exc:
        print(f"failed {source}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    sys.stdout.write(html)


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
