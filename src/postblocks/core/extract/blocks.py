"""Multi-pass extraction of typed content blocks from article HTML"""

import logging
from functools import partial
from typing import Callable, Optional

from postblocks.core.extract import patterns as P
from postblocks.core.extract.ranges import ConsumedRanges
from postblocks.core.models import (
    CodeBlock, ContentBlock, ExtractedBlock, HeadingBlock, ImageBlock,
    ListBlock, ParagraphBlock, QuoteBlock, TableBlock,
)
from postblocks.core.utils.slug import fold_for_anchor
from postblocks.core.utils.text import strip_markup


logger = logging.getLogger(__name__)


def _int_attr(value: Optional[str]) -> Optional[int]:
    return int(value) if value and value.isdigit() else None


def _image_from_attrs(attrs: dict[str, str], caption: Optional[str] = None) -> Optional[ImageBlock]:
    """Build an ImageBlock from parsed <img> attributes; None when src is missing."""
    url = (attrs.get('src') or '').strip()
    if not url:
        return None
    return ImageBlock(
        url=url,
        alt=attrs.get('alt', ''),
        caption=caption or None,
        width=_int_attr(attrs.get('width')),
        height=_int_attr(attrs.get('height')),
    )


def _code(m) -> Optional[CodeBlock]:
    text = m.group(2)
    if not text.strip():
        return None
    lang = P.LANGUAGE_CLASS_RE.search(P.parse_attrs(m.group(1)).get('class', ''))
    return CodeBlock(text=text, language=lang.group(1) if lang else None)


def _figure(m) -> Optional[ImageBlock]:
    inner = m.group(1)
    img = P.IMAGE_RE.search(inner)
    if img is None:
        return None
    caption = P.FIGCAPTION_RE.search(inner)
    return _image_from_attrs(P.parse_attrs(img.group(1)), strip_markup(caption.group(1)) if caption else None)


def _image(m) -> Optional[ImageBlock]:
    return _image_from_attrs(P.parse_attrs(m.group(1)))


def _table(m) -> Optional[TableBlock]:
    """Header row (first row made only of <th> cells) then body rows; cells stripped to text."""
    headers: list[str] = []
    rows: list[list[str]] = []
    for i, row in enumerate(P.ROW_RE.finditer(m.group(1))):
        cells = list(P.CELL_RE.finditer(row.group(1)))
        if not cells:
            continue
        texts = [strip_markup(c.group(2)) for c in cells]
        if i == 0 and all(c.group(1).lower() == 'h' for c in cells):
            headers = texts
        else:
            rows.append(texts)
    if not headers and not rows:
        return None
    return TableBlock(headers=headers, rows=rows)


def _list(kind: str, m) -> Optional[ListBlock]:
    items = [text for li in P.LI_RE.finditer(m.group(1)) if (text := strip_markup(li.group(1)))]
    if not items:
        return None
    return ListBlock(kind=kind, items=items)


def _quote(m) -> Optional[QuoteBlock]:
    text = strip_markup(m.group(1))
    return QuoteBlock(text=text) if text else None


def _heading(m) -> Optional[HeadingBlock]:
    text = strip_markup(m.group(3))
    if not text:
        return None
    anchor = P.parse_attrs(m.group(2)).get('id') or fold_for_anchor(text)
    return HeadingBlock(level=int(m.group(1)), text=text, anchor=anchor or None)


def _paragraph(m) -> Optional[ParagraphBlock]:
    content = m.group(1).strip()
    if not content or P.BLOCK_OPEN_RE.match(content):
        return None
    text = strip_markup(content)
    return ParagraphBlock(text=text) if text else None


Builder = Callable[..., Optional[ContentBlock]]

# Fixed priority: earlier passes claim their spans before later passes scan.
PASSES: list[tuple[str, object, Builder]] = [
    ('code',           P.CODE_RE,      _code),
    ('figure',         P.FIGURE_RE,    _figure),
    ('image',          P.IMAGE_RE,     _image),
    ('table',          P.TABLE_RE,     _table),
    ('unordered_list', P.UL_RE,        partial(_list, 'unordered')),
    ('ordered_list',   P.OL_RE,        partial(_list, 'ordered')),
    ('quote',          P.QUOTE_RE,     _quote),
    ('heading',        P.HEADING_RE,   _heading),
    ('paragraph',      P.PARAGRAPH_RE, _paragraph),
]

# Passes whose matches may wrap blocks claimed by earlier passes.
CONTAINERS = frozenset({'table', 'unordered_list', 'ordered_list', 'quote', 'heading', 'paragraph'})


def _cut(html: str, start: int, end: int, spans: list[tuple[int, int]]) -> str:
    """Source of [start, end) with the given inner spans removed."""
    parts, pos = [], start
    for s, e in spans:
        parts.append(html[pos:s])
        pos = e
    parts.append(html[pos:end])
    return ''.join(parts)


def _gaps(start: int, end: int, spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """Pieces of [start, end) not covered by the sorted inner spans."""
    pieces, pos = [], start
    for s, e in spans:
        if s > pos:
            pieces.append((pos, s))
        pos = max(pos, e)
    if pos < end:
        pieces.append((pos, end))
    return pieces


def extract_blocks(html: str) -> list[ExtractedBlock]:
    """Run every pass over the whole source and return accepted blocks in pass order.

    A container match (table, list, quote, heading, paragraph) that fully
    encloses earlier claims is still accepted. Enclosed images become part of
    the container and their blocks are dropped. Other enclosed blocks, such as
    code, keep their claim and are cut out of the container's content. Any
    match that partially overlaps a claim, or lies inside one, is skipped.

    Each block's `order` is a counter over surviving blocks in the sequence the
    passes ran.
    """
    consumed = ConsumedRanges()
    owners: dict[tuple[int, int], int] = {}
    accepted: list[Optional[ExtractedBlock]] = []

    for name, pattern, build in PASSES:
        for m in pattern.finditer(html):
            start, end = m.span()
            inner = consumed.overlapping(start, end)
            if inner and (name not in CONTAINERS or any(s < start or e > end for s, e in inner)):
                logger.debug("%s match at [%d, %d) already claimed; skipped", name, start, end)
                continue

            absorbed = [span for span in inner if accepted[owners[span]].block.type == 'image']
            kept = [span for span in inner if span not in absorbed]
            source = pattern.match(_cut(html, start, end, kept)) if kept else m
            block = build(source) if source else None
            if block is None:
                logger.debug("%s match at [%d, %d) is empty; discarded", name, start, end)
                continue

            for span in absorbed:
                logger.debug("image at [%d, %d) folded into %s at [%d, %d)", *span, name, start, end)
                consumed.release(*span)
                accepted[owners.pop(span)] = None
            claimed = _gaps(start, end, kept)
            for span in claimed:
                consumed.claim(*span)
                owners[span] = len(accepted)
            accepted.append(ExtractedBlock(start=start, end=end, block=block, claimed=claimed))

    survivors = [e for e in accepted if e is not None]
    extracted = [
        e.model_copy(update={'block': e.block.model_copy(update={'order': i})})
        for i, e in enumerate(survivors)
    ]
    logger.debug("extracted %d block(s) from %d chars", len(extracted), len(html))
    return extracted
