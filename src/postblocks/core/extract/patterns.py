"""Regex patterns for the block-level tags produced by the article editor"""

import re
from html import unescape


_FLAGS = re.IGNORECASE | re.DOTALL

CODE_RE       = re.compile(r'<pre\b[^>]*>\s*<code\b([^>]*)>(.*?)</code>\s*</pre>', _FLAGS)
FIGURE_RE     = re.compile(r'<figure\b[^>]*>(.*?)</figure>', _FLAGS)
FIGCAPTION_RE = re.compile(r'<figcaption\b[^>]*>(.*?)</figcaption>', _FLAGS)
IMAGE_RE      = re.compile(r'<img\b([^>]*?)/?>', _FLAGS)
TABLE_RE      = re.compile(r'<table\b[^>]*>(.*?)</table>', _FLAGS)
ROW_RE        = re.compile(r'<tr\b[^>]*>(.*?)</tr>', _FLAGS)
CELL_RE       = re.compile(r'<t([hd])\b[^>]*>(.*?)</t\1>', _FLAGS)
UL_RE         = re.compile(r'<ul\b[^>]*>(.*?)</ul>', _FLAGS)
OL_RE         = re.compile(r'<ol\b[^>]*>(.*?)</ol>', _FLAGS)
LI_RE         = re.compile(r'<li\b[^>]*>(.*?)</li>', _FLAGS)
QUOTE_RE      = re.compile(r'<blockquote\b[^>]*>(.*?)</blockquote>', _FLAGS)
HEADING_RE    = re.compile(r'<h([1-6])\b([^>]*)>(.*?)</h\1>', _FLAGS)
PARAGRAPH_RE  = re.compile(r'<p\b[^>]*>(.*?)</p>', _FLAGS)

# name="value" or name='value'; attribute order inside a tag is free.
ATTR_RE = re.compile(r'([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')

LANGUAGE_CLASS_RE = re.compile(r'(?:^|\s)(?:language|lang)-([^\s"]+)')

# Paragraphs opening with one of these are wrappers, not prose.
BLOCK_OPEN_RE = re.compile(
    r'<(?:p|div|pre|code|figure|img|table|ul|ol|li|blockquote|h[1-6]|section|article|hr|iframe)\b',
    re.IGNORECASE,
)


def parse_attrs(fragment: str) -> dict[str, str]:
    """Return lowercased attribute names mapped to their entity-decoded values."""
    return {
        m.group(1).lower(): unescape(m.group(2) if m.group(2) is not None else m.group(3))
        for m in ATTR_RE.finditer(fragment)
    }
