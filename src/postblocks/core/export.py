"""Export: write rendered article HTML and a sidecar JSON per article"""

import json
from pathlib import Path

from postblocks.config import Settings
from postblocks.core.render import render, render_toc
from postblocks.crud.articles import load_structure
from postblocks.crud.models import Article


def build_page(article: Article, settings: Settings) -> str:
    """Return the TOC nav (when there are headings) followed by the rendered body."""
    structure = load_structure(article)
    nav = render_toc(structure.toc, title=settings.toc_title)
    body = render(structure, pros_label=settings.pros_label, cons_label=settings.cons_label)
    return f"{nav}\n\n{body}\n" if nav else f"{body}\n"


def build_sidecar(article: Article) -> dict:
    """Build the sidecar JSON dict: identity, TOC, reading stats, and the full structure."""
    structure = load_structure(article)
    return {
        "slug": article.slug,
        "title": article.title,
        "path": article.path,
        "version": article.version,
        "updated_at": article.updated_at.isoformat() if article.updated_at else None,
        "toc": [e.model_dump() for e in structure.toc],
        "word_count": structure.word_count,
        "estimated_read_minutes": structure.estimated_read_minutes,
        "structure": structure.model_dump(mode="json"),
    }


def write_article(article: Article, output_dir: Path, settings: Settings) -> tuple[Path, Path]:
    """Write <slug>.html + <slug>.json under output_dir. Returns (html_path, json_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / f"{article.slug}.html"
    json_path = output_dir / f"{article.slug}.json"
    html_path.write_text(build_page(article, settings), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(article), indent=2, ensure_ascii=False), encoding='utf-8')
    return html_path, json_path
