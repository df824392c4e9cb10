"""Pipeline step functions: import and export orchestration"""

import logging
from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import Session

from postblocks.config import Settings
from postblocks.core.export import write_article
from postblocks.core.parse import discover_files, parse_file
from postblocks.crud.articles import commit_article
from postblocks.crud.models import Article


logger = logging.getLogger(__name__)


def run_import(engine: Engine, path: str, settings: Settings) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Parse every article file under path and upsert it.

    Returns (counts, changes) where changes is a list of (status, slug) for
    created/updated articles. Returns ({}, []) when no files are found.
    """
    files = discover_files(Path(path))
    if not files:
        return {}, []

    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for p in files:
            try:
                parsed = parse_file(
                    p, settings.parser_config, settings.words_per_minute, settings.keep_pass_order,
                )
            except Exception as e:
                raise RuntimeError(f"Failed to parse {p}: {e}") from e
            article, status = commit_article(
                session, parsed, settings.words_per_minute, settings.keep_pass_order,
            )
            logger.info("%s: %s (%d blocks)", status, article.slug, len(parsed.structure.blocks))
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, article.slug))
        session.commit()
    return counts, changes


def run_export(
    articles: list[Article],
    output_dir: Path,
    settings: Settings,
    ) -> list[tuple[str, Path]]:
    """Write articles to output_dir. Returns (slug, html_path) pairs."""
    results = []
    for article in articles:
        html_path, _ = write_article(article, output_dir, settings)
        results.append((article.slug, html_path))
    return results
