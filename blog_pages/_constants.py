"""Common literal values used across blog_pages.

These constants keep markers, file suffixes, and front-matter keys
centralized so the parser, builder, and tests import the same values without
drifting.

Examples
--------
>>> from blog_pages import _constants
>>> _constants.FRONT_MATTER_MARKER
'---'
>>> _constants.OUTPUT_SUFFIX
'.html'
"""

FRONT_MATTER_MARKER = "---"
DEFAULT_LAYOUT = "default"
LAYOUT_KEY = "layout"
MARKDOWN_SUFFIXES = (".md", ".markdown")
OUTPUT_SUFFIX = ".html"
LAYOUT_SUFFIXES = (".jinja", ".html")
