"""Content block variants, table-of-contents entries, and the article Structure"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


def new_block_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StructureError(ValueError):
    """Raised when a value handed to the renderer is not a well-formed Structure."""


class _Block(BaseModel):
    """Fields shared by every block: immutable identity and render position."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(default_factory=new_block_id)
    order: int = Field(default=0, ge=0)


class HeadingBlock(_Block):
    type: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    text: str
    anchor: Optional[str] = None


class ParagraphBlock(_Block):
    type: Literal["paragraph"] = "paragraph"
    text: str


class ImageBlock(_Block):
    type: Literal["image"] = "image"
    url: str
    alt: str = ""
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ListBlock(_Block):
    type: Literal["list"] = "list"
    kind: Literal["ordered", "unordered"] = "unordered"
    items: list[str] = []


class TableBlock(_Block):
    type: Literal["table"] = "table"
    headers: list[str] = []
    rows: list[list[str]] = []


class QuoteBlock(_Block):
    type: Literal["quote"] = "quote"
    text: str


class CodeBlock(_Block):
    type: Literal["code"] = "code"
    text: str
    language: Optional[str] = None


class FaqItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    question: str
    answer: str


class FaqBlock(_Block):
    """Manually authored question/answer list; never produced by extraction."""
    type: Literal["faq"] = "faq"
    items: list[FaqItem] = []


class ReviewBlock(_Block):
    """Manually authored product/provider review; never produced by extraction."""
    type: Literal["review"] = "review"
    provider: str
    rating: float = Field(..., ge=0, le=5)
    summary: Optional[str] = None
    pros: list[str] = []
    cons: list[str] = []


class RawHtmlBlock(_Block):
    """Escape hatch: emitted verbatim by the renderer."""
    type: Literal["html"] = "html"
    html: str


ContentBlock = Annotated[
    Union[
        HeadingBlock, ParagraphBlock, ImageBlock, ListBlock, TableBlock,
        QuoteBlock, CodeBlock, FaqBlock, ReviewBlock, RawHtmlBlock,
    ],
    Field(discriminator="type"),
]

block_adapter: TypeAdapter[ContentBlock] = TypeAdapter(ContentBlock)


class TocEntry(BaseModel):
    """One in-page navigation link, derived from a heading block (levels 2-6)."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    level: int = Field(..., ge=2, le=6)
    anchor: str


class Structure(BaseModel):
    """Ordered blocks of one article body plus derived TOC and reading statistics."""
    model_config = ConfigDict(frozen=True)

    blocks: list[ContentBlock] = []
    toc: list[TocEntry] = []
    word_count: int = Field(default=0, ge=0)
    estimated_read_minutes: int = Field(default=0, ge=0)
    last_updated: datetime = Field(default_factory=utcnow)


class ExtractedBlock(BaseModel):
    """A block accepted by an extraction pass.

    `start`/`end` is the whole matched span. `claimed` is the part of it the
    block owns: the full span, minus any nested blocks that kept their own
    claim (e.g. a code block inside a list item).
    """
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    block: ContentBlock
    claimed: list[tuple[int, int]] = []


class ParsedArticle(BaseModel):
    """Result of reading one source file: identifying metadata plus its parsed Structure."""
    path: Path
    slug: str
    title: str
    frontmatter: dict[str, Any] = {}
    html: str
    structure: Structure
