"""Behaviour tests for the document render pipeline.

These pytest-bdd scenarios drive ``SiteBuilder`` against a throwaway site in
``tmp_path``. The feature file ``render_pipeline.feature`` covers the
end-to-end path from front matter to layout and proves that a document naming
an unknown layout fails on its own without stopping the build.

Usage
-----
Run ``pytest tests/bdd/test_render_pipeline.py -v`` after installing the test
extras (``pip install -e .[test]``). No network access is required.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from blog_pages.config import SiteConfig
from blog_pages.generator import BuildReport, SiteBuilder

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "render_pipeline.feature"
)
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a site with a default layout")
def given_site(tmp_path: Path, scenario_state: ScenarioState) -> None:
    """Create empty content and output folders plus a ``default`` layout."""
    content_dir = tmp_path / "content"
    content_dir.mkdir()
    layouts_dir = tmp_path / "layouts"
    layouts_dir.mkdir()
    (layouts_dir / "default.jinja").write_text(
        '<body><main id="content">{{ content }}</main></body>\n', encoding="utf-8"
    )
    scenario_state["config"] = SiteConfig(
        content_dir=content_dir,
        output_dir=tmp_path / "public",
        layouts_dir=layouts_dir,
    )


@given(parsers.parse('a document "{name}" containing "{text}"'))
def given_document(name: str, text: str, scenario_state: ScenarioState) -> None:
    """Write a content file, expanding ``\\n`` escapes from the feature file."""
    config = typ.cast("SiteConfig", scenario_state["config"])
    path = config.content_dir / name
    path.write_text(text.replace("\\n", "\n"), encoding="utf-8")


@when("I build the site")
def when_build(scenario_state: ScenarioState) -> None:
    """Run the builder and keep its report."""
    config = typ.cast("SiteConfig", scenario_state["config"])
    scenario_state["report"] = SiteBuilder(config).run()


@then(
    parsers.parse(
        '"{page}" contains a single level-1 heading "{title}" inside the layout'
    )
)
def then_single_heading(page: str, title: str, scenario_state: ScenarioState) -> None:
    """Verify the layout wraps exactly one heading with the expected text."""
    config = typ.cast("SiteConfig", scenario_state["config"])
    html = (config.output_dir / page).read_text(encoding="utf-8")
    main = BeautifulSoup(html, "html.parser").find("main", id="content")
    assert main is not None, "expected the layout's content region in the page"
    children = main.find_all(recursive=False)
    assert [child.name for child in children] == ["h1"], (
        f"expected one h1 in the content region, got {children!r}"
    )
    assert children[0].get_text() == title


@then(parsers.parse('"{source}" is reported as a missing layout'))
def then_reported(source: str, scenario_state: ScenarioState) -> None:
    """Verify the report records the failed document."""
    report = typ.cast("BuildReport", scenario_state["report"])
    assert PurePosixPath(source) in report.failures
    assert "not found" in report.failures[PurePosixPath(source)]


@then(parsers.parse('no output is written for "{source}"'))
def then_no_output(source: str, scenario_state: ScenarioState) -> None:
    """Verify no HTML exists for the failed document."""
    config = typ.cast("SiteConfig", scenario_state["config"])
    output = config.output_dir / PurePosixPath(source).with_suffix(".html")
    assert not output.exists()
