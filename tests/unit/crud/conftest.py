"""Shared fixtures for crud unit tests"""

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from postblocks.core.models import ParsedArticle
from postblocks.core.structure import parse
import postblocks.crud.models  # noqa: F401


GUIDE_HTML = "<h2>Setup</h2><p>Install the glass.</p><ul><li>Measure</li><li>Cut</li></ul>"


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


def make_parsed(html: str = GUIDE_HTML, slug: str = "guide", frontmatter: dict = None) -> ParsedArticle:
    return ParsedArticle(
        path=Path(f"posts/{slug}.html"),
        slug=slug,
        title="Guide",
        frontmatter=frontmatter or {},
        html=html,
        structure=parse(html),
    )


@pytest.fixture(name="parsed")
def parsed_fixture():
    return make_parsed()


@pytest.fixture(name="make_parsed")
def make_parsed_fixture():
    return make_parsed
