"""File discovery, frontmatter extraction, and markdown/HTML article loading"""

import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from postblocks.core.models import ParsedArticle, Structure
from postblocks.core.structure import parse
from postblocks.core.utils.slug import slugify
from postblocks.core.utils.text import WORDS_PER_MINUTE


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}
HTML_EXTENSIONS = {'.html', '.htm'}
SUPPORTED_EXTENSIONS = MD_EXTENSIONS | HTML_EXTENSIONS


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def markdown_to_html(body: str, preset: str = 'gfm-like') -> str:
    return _make_parser(preset).render(body)


def discover_files(path: Path) -> list[Path]:
    """Return sorted article files under path, or [path] if a single supported file."""
    if path.is_file():
        return [path] if path.suffix.lower() in SUPPORTED_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix.lower() in SUPPORTED_EXTENSIONS)


def _title(frontmatter: dict[str, Any], structure: Structure, fallback: str) -> str:
    if frontmatter.get('title'):
        return str(frontmatter['title'])
    heading = next((b for b in structure.blocks if b.type == 'heading'), None)
    return heading.text if heading else fallback


def parse_file(
    path: Path,
    parser_config: str = 'gfm-like',
    words_per_minute: int = WORDS_PER_MINUTE,
    keep_pass_order: bool = False,
    ) -> ParsedArticle:
    """Read an .html/.md article and parse its body into a Structure."""
    frontmatter, body = strip_frontmatter(path.read_text(encoding='utf-8'))
    html = markdown_to_html(body, parser_config) if path.suffix.lower() in MD_EXTENSIONS else body
    structure = parse(html, words_per_minute=words_per_minute, keep_pass_order=keep_pass_order)
    return ParsedArticle(
        path=path,
        slug=str(frontmatter.get('slug') or slugify(path.stem)),
        title=_title(frontmatter, structure, path.stem),
        frontmatter=frontmatter,
        html=html,
        structure=structure,
    )
