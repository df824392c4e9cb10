"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Callable, Optional

import typer
from pydantic import ValidationError
from sqlmodel import Session, SQLModel

from postblocks.config import Settings, load_config
from postblocks.core.editor import add_block, remove_block, reorder_blocks, update_block
from postblocks.core.models import Structure
from postblocks.core.pipeline import run_export, run_import
from postblocks.core.render import render_toc
from postblocks.crud.articles import StaleArticleError, edit_article, get_all_articles, get_by_slug, load_structure
from postblocks.crud.database import init_db, make_engine


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except (ValueError, ValidationError) as e:
        _fail(str(e))


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _json_arg(value: str) -> dict:
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        _fail("Block data must be a JSON object", e)
    if not isinstance(data, dict):
        _fail("Block data must be a JSON object")
    return data


def _edit(slug: str, edit: Callable[[Structure], Structure]) -> None:
    """Apply an editor function to one stored article and report the new block count."""
    settings = _settings()
    engine = _engine(settings)
    try:
        with Session(engine) as session:
            article = edit_article(
                session, slug, edit,
                words_per_minute=settings.words_per_minute,
                pros_label=settings.pros_label,
                cons_label=settings.cons_label,
            )
            blocks = len(article.structure["blocks"])
            session.commit()
    except LookupError as e:
        _fail(str(e))
    except StaleArticleError as e:
        _fail("Article was modified concurrently; retry", e)
    except ValidationError as e:
        _fail("Invalid block data", e)
    typer.echo(f"{slug}: {blocks} block(s)")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def import_cmd(
    path: Annotated[str, typer.Argument(help="HTML/markdown file or directory to import")],
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    pass_order: Annotated[bool, typer.Option("--pass-order", help="Group blocks by extraction pass")] = False,
    ):
    """Parse article files into block structures and upsert them."""
    settings = _settings(overrides={"parser_config": parser, "keep_pass_order": pass_order or None})
    engine = _engine(settings)
    try:
        counts, changes = run_import(engine, path, settings)
    except RuntimeError as e:
        _fail(str(e))
    if not counts:
        typer.echo(f"No article files found at {path}.")
        raise typer.Exit(1)
    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    typer.echo(
        f"Import complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    slug: Annotated[Optional[str], typer.Option("--slug", help="Export a single article")] = None,
    ):
    """Write rendered HTML + sidecar JSON for stored articles."""
    settings = _settings(overrides={"output_dir": out})
    engine = _engine(settings)
    output_dir = Path(settings.output_dir)

    with Session(engine) as session:
        if slug:
            article = get_by_slug(session, slug)
            articles = [article] if article else []
        else:
            articles = get_all_articles(session)
        if not articles:
            typer.echo("No articles to export.")
            raise typer.Exit(1)
        try:
            results = run_export(articles, output_dir, settings)
        except OSError as e:
            _fail("Export failed", e)

    for exported, html_path in results:
        typer.echo(f"  {exported} -> {html_path}")
    typer.echo(f"Exported {len(results)} article(s) to {output_dir}/")


def blocks_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    ):
    """List an article's blocks in order with their ids."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        article = get_by_slug(session, slug)
        if article is None:
            _fail(f"No article with slug '{slug}'")
        structure = load_structure(article)
    for b in structure.blocks:
        preview = getattr(b, "text", None) or getattr(b, "url", None) or ""
        typer.echo(f"{b.order:>3}  {b.id}  {b.type:<9}  {preview[:60]}")
    typer.echo(f"{structure.word_count} words, ~{structure.estimated_read_minutes} min read")


def toc_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    ):
    """Print the article's table-of-contents navigation HTML."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        article = get_by_slug(session, slug)
        if article is None:
            _fail(f"No article with slug '{slug}'")
        structure = load_structure(article)
    typer.echo(render_toc(structure.toc, title=settings.toc_title))


def add_block_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    data: Annotated[str, typer.Argument(help='Block JSON, e.g. \'{"type": "paragraph", "text": "Hi"}\'')],
    after: Annotated[Optional[str], typer.Option("--after", help="Insert after this block id")] = None,
    ):
    """Insert a new block after a given block, or at the end."""
    fields = _json_arg(data)
    _edit(slug, lambda s: add_block(s, fields, after_id=after))


def update_block_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    block_id: Annotated[str, typer.Argument(help="Block id")],
    data: Annotated[str, typer.Argument(help="JSON object of fields to merge")],
    ):
    """Merge fields into an existing block."""
    fields = _json_arg(data)
    _edit(slug, lambda s: update_block(s, block_id, fields))


def remove_block_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    block_id: Annotated[str, typer.Argument(help="Block id")],
    ):
    """Delete a block."""
    _edit(slug, lambda s: remove_block(s, block_id))


def reorder_cmd(
    slug: Annotated[str, typer.Argument(help="Article slug")],
    block_ids: Annotated[list[str], typer.Argument(help="Block ids in the new order; omitted blocks are dropped")],
    ):
    """Reorder blocks. Any block not listed is removed."""
    _edit(slug, lambda s: reorder_blocks(s, block_ids))
