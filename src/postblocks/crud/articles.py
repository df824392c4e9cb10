"""Article persistence: upsert from parsed files, lookups, and compare-and-set structure edits"""

import hashlib
import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import update
from sqlmodel import Session, select

from postblocks.core.models import ParsedArticle, Structure
from postblocks.core.render import CONS_LABEL, PROS_LABEL, render
from postblocks.core.structure import refresh_stats
from postblocks.core.utils.text import WORDS_PER_MINUTE
from postblocks.crud.models import Article


logger = logging.getLogger(__name__)


class StaleArticleError(Exception):
    """The article changed since it was read; the edit must be retried on fresh data."""


def _hash(html: str, *options) -> str:
    """sha256 of the html, salted with any parse options that shape its structure."""
    payload = html + "".join(f"\x00{o}" for o in options)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def get_by_slug(session: Session, slug: str) -> Article | None:
    """Return the Article with the given slug, or None if not found."""
    return session.exec(select(Article).where(Article.slug == slug)).one_or_none()


def get_all_articles(session: Session) -> list[Article]:
    return list(session.exec(select(Article).order_by(Article.slug)).all())


def load_structure(article: Article) -> Structure:
    return Structure.model_validate(article.structure)


def commit_article(
    session: Session,
    parsed: ParsedArticle,
    words_per_minute: int = WORDS_PER_MINUTE,
    keep_pass_order: bool = False,
    ) -> tuple[Article, str]:
    """Upsert a parsed article by slug.

    Returns (article, status) where status is 'created', 'updated', or 'unchanged'.
    The change check covers the html and the parse options it was parsed with,
    so re-importing with different options refreshes the stored structure.
    Flushes but does not commit; caller controls the transaction.
    """
    data = parsed.model_dump(mode="json")
    html_hash = _hash(parsed.html, words_per_minute, keep_pass_order)
    article = get_by_slug(session, parsed.slug)

    if article:
        if article.hash == html_hash:
            return article, 'unchanged'
        article.title = parsed.title
        article.path = data['path']
        article.html = parsed.html
        article.structure = data['structure']
        article.frontmatter = data['frontmatter'] or None
        article.hash = html_hash
        article.version += 1
        article.updated_at = datetime.now()
        session.add(article)
        session.flush()
        return article, 'updated'

    article = Article(
        slug=parsed.slug,
        title=parsed.title,
        path=data['path'],
        html=parsed.html,
        structure=data['structure'],
        frontmatter=data['frontmatter'] or None,
        hash=html_hash,
    )
    session.add(article)
    session.flush()
    return article, 'created'


def save_structure(
    session: Session,
    article: Article,
    structure: Structure,
    expected_version: int,
    words_per_minute: int = WORDS_PER_MINUTE,
    pros_label: str = PROS_LABEL,
    cons_label: str = CONS_LABEL,
    ) -> Article:
    """Persist an edited structure and its re-rendered HTML if the row is still at expected_version.

    Word count and read time are re-derived before writing. Raises
    StaleArticleError when another writer bumped the version first.
    """
    structure = refresh_stats(structure, words_per_minute)
    html = render(structure, pros_label=pros_label, cons_label=cons_label)
    stmt = (
        update(Article)
        .where(Article.id == article.id)
        .where(Article.version == expected_version)
        .values(
            html=html,
            structure=structure.model_dump(mode="json"),
            hash=_hash(html),
            version=expected_version + 1,
            updated_at=datetime.now(),
        )
    )
    result = session.connection().execute(stmt)
    if result.rowcount == 0:
        raise StaleArticleError(
            f"Article '{article.slug}' is no longer at version {expected_version}"
        )
    session.refresh(article)
    logger.info("saved %s at version %d", article.slug, article.version)
    return article


def edit_article(
    session: Session,
    slug: str,
    edit: Callable[[Structure], Structure],
    **save_options,
    ) -> Article:
    """Read-modify-write: apply a pure editor function to the stored structure and save it.

    Raises LookupError for an unknown slug.
    """
    article = get_by_slug(session, slug)
    if article is None:
        raise LookupError(f"No article with slug '{slug}'")
    version = article.version
    return save_structure(session, article, edit(load_structure(article)), version, **save_options)
