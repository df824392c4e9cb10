"""Render a Structure back to article HTML and its TOC to a navigation fragment"""

from html import escape
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from postblocks.core.models import (
    CodeBlock, ContentBlock, FaqBlock, HeadingBlock, ImageBlock, ListBlock,
    ParagraphBlock, QuoteBlock, RawHtmlBlock, ReviewBlock, Structure,
    StructureError, TableBlock, TocEntry,
)


TOC_TITLE = "Table of Contents"
PROS_LABEL = "Pros"
CONS_LABEL = "Cons"

_toc_adapter = TypeAdapter(list[TocEntry])


def _as_structure(value: Any) -> Structure:
    if isinstance(value, Structure):
        return value
    if not isinstance(value, dict):
        raise StructureError(f"Expected a Structure or mapping, got {type(value).__name__}")
    try:
        return Structure.model_validate(value)
    except ValidationError as e:
        raise StructureError(f"Malformed structure: {e}") from e


def _as_toc(value: Any) -> list[TocEntry]:
    if not isinstance(value, (list, tuple)):
        raise StructureError(f"Expected a list of TOC entries, got {type(value).__name__}")
    try:
        return _toc_adapter.validate_python(
            [e.model_dump() if isinstance(e, TocEntry) else e for e in value]
        )
    except ValidationError as e:
        raise StructureError(f"Malformed table of contents: {e}") from e


def _attr(value: Any) -> str:
    return escape(str(value), quote=True)


def _heading(b: HeadingBlock, **_) -> str:
    anchor = f' id="{_attr(b.anchor)}"' if b.anchor else ''
    return f'<h{b.level}{anchor}>{b.text}</h{b.level}>'


def _paragraph(b: ParagraphBlock, **_) -> str:
    return f'<p>{b.text}</p>'


def _image(b: ImageBlock, **_) -> str:
    attrs = [f'src="{_attr(b.url)}"', f'alt="{_attr(b.alt)}"']
    if b.width:
        attrs.append(f'width="{b.width}"')
    if b.height:
        attrs.append(f'height="{b.height}"')
    img = f'<img {" ".join(attrs)} />'
    if b.caption:
        return f'<figure>{img}<figcaption>{b.caption}</figcaption></figure>'
    return img


def _list(b: ListBlock, **_) -> str:
    tag = 'ol' if b.kind == 'ordered' else 'ul'
    return f'<{tag}>' + ''.join(f'<li>{i}</li>' for i in b.items) + f'</{tag}>'


def _table(b: TableBlock, **_) -> str:
    html = '<table>'
    if b.headers:
        html += '<thead><tr>' + ''.join(f'<th>{h}</th>' for h in b.headers) + '</tr></thead>'
    html += '<tbody>' + ''.join(
        '<tr>' + ''.join(f'<td>{c}</td>' for c in row) + '</tr>' for row in b.rows
    ) + '</tbody>'
    return html + '</table>'


def _quote(b: QuoteBlock, **_) -> str:
    return f'<blockquote>{b.text}</blockquote>'


def _code(b: CodeBlock, **_) -> str:
    lang = f' class="language-{_attr(b.language)}"' if b.language else ''
    return f'<pre><code{lang}>{b.text}</code></pre>'


def _faq(b: FaqBlock, **_) -> str:
    if not b.items:
        return ''
    items = ''.join(
        f'<div class="faq-item"><dt>{f.question}</dt><dd>{f.answer}</dd></div>' for f in b.items
    )
    return f'<div class="faq-section">{items}</div>'


def _review(b: ReviewBlock, pros_label: str = PROS_LABEL, cons_label: str = CONS_LABEL, **_) -> str:
    parts = [
        f'<div class="review-block" data-provider="{_attr(b.provider)}" data-rating="{b.rating:g}">',
        f'<h4>{b.provider} - {b.rating:g}/5</h4>',
    ]
    if b.summary:
        parts.append(f'<p>{b.summary}</p>')
    if b.pros:
        items = ''.join(f'<li>{p}</li>' for p in b.pros)
        parts.append(f'<div class="pros"><strong>{pros_label}:</strong><ul>{items}</ul></div>')
    if b.cons:
        items = ''.join(f'<li>{c}</li>' for c in b.cons)
        parts.append(f'<div class="cons"><strong>{cons_label}:</strong><ul>{items}</ul></div>')
    parts.append('</div>')
    return '\n'.join(parts)


def _raw_html(b: RawHtmlBlock, **_) -> str:
    return b.html


RENDERERS: dict[str, Callable[..., str]] = {
    'heading':   _heading,
    'paragraph': _paragraph,
    'image':     _image,
    'list':      _list,
    'table':     _table,
    'quote':     _quote,
    'code':      _code,
    'faq':       _faq,
    'review':    _review,
    'html':      _raw_html,
}


def render_block(block: ContentBlock, **labels: str) -> str:
    """Render one block with its variant's fixed template."""
    return RENDERERS[block.type](block, **labels)


def render(structure: Structure | dict, pros_label: str = PROS_LABEL, cons_label: str = CONS_LABEL) -> str:
    """Render blocks in `order`, one fragment per block, joined by blank lines.

    Raises StructureError if structure is not a well-formed Structure value.
    """
    s = _as_structure(structure)
    fragments = (
        render_block(b, pros_label=pros_label, cons_label=cons_label)
        for b in sorted(s.blocks, key=lambda b: b.order)
    )
    return '\n\n'.join(f for f in fragments if f)


def render_toc(toc: list[TocEntry] | list[dict], title: str = TOC_TITLE) -> str:
    """Render a <nav> with one level-classed link per TOC entry; empty TOC renders ''."""
    entries = _as_toc(toc)
    if not entries:
        return ''
    links = ''.join(
        f'<li class="toc-level-{e.level}"><a href="#{_attr(e.anchor)}">{e.text}</a></li>' for e in entries
    )
    return f'<nav class="table-of-contents">\n<h2>{title}</h2>\n<ul>{links}</ul>\n</nav>'
