"""Assemble extracted blocks into a Structure with derived TOC and reading stats"""

from postblocks.core.extract.blocks import extract_blocks
from postblocks.core.models import ContentBlock, Structure, TocEntry, utcnow
from postblocks.core.utils.slug import fold_for_anchor
from postblocks.core.utils.text import WORDS_PER_MINUTE, count_words, estimate_read_minutes


TOC_LEVELS = range(2, 7)


def reindex(blocks: list[ContentBlock]) -> list[ContentBlock]:
    """Return copies of blocks with order set to their list position (0..n-1)."""
    return [b if b.order == i else b.model_copy(update={'order': i}) for i, b in enumerate(blocks)]


def build_toc(blocks: list[ContentBlock]) -> list[TocEntry]:
    """Derive TOC entries from heading blocks of level 2-6, in block order."""
    return [
        TocEntry(id=b.id, text=b.text, level=b.level, anchor=b.anchor or fold_for_anchor(b.text))
        for b in blocks
        if b.type == 'heading' and b.level in TOC_LEVELS
    ]


def count_block_words(block: ContentBlock) -> int:
    """Words a single block contributes to the article total. Tables and reviews count 0."""
    if block.type in ('heading', 'paragraph', 'quote', 'code'):
        return count_words(block.text)
    if block.type == 'list':
        return sum(count_words(item) for item in block.items)
    if block.type == 'image':
        return count_words(block.caption) if block.caption else 0
    if block.type == 'faq':
        return sum(count_words(f.question) + count_words(f.answer) for f in block.items)
    if block.type == 'html':
        return count_words(block.html)
    return 0


def compute_word_count(blocks: list[ContentBlock]) -> int:
    return sum(count_block_words(b) for b in blocks)


def parse(html: str, words_per_minute: int = WORDS_PER_MINUTE, keep_pass_order: bool = False) -> Structure:
    """Convert article HTML into a Structure.

    Blocks are sequenced by their position in the source unless keep_pass_order
    is set, in which case they stay grouped by extraction pass (code, images,
    tables, lists, quotes, headings, paragraphs).
    """
    extracted = extract_blocks(html)
    if not keep_pass_order:
        extracted = sorted(extracted, key=lambda e: e.start)
    blocks = reindex([e.block for e in extracted])
    word_count = compute_word_count(blocks)
    return Structure(
        blocks=blocks,
        toc=build_toc(blocks),
        word_count=word_count,
        estimated_read_minutes=estimate_read_minutes(word_count, words_per_minute),
        last_updated=utcnow(),
    )


def create_empty_structure() -> Structure:
    return Structure(blocks=[], toc=[], word_count=0, estimated_read_minutes=0, last_updated=utcnow())


def refresh_stats(structure: Structure, words_per_minute: int = WORDS_PER_MINUTE) -> Structure:
    """Recompute word count and read time for the current blocks.

    Editor operations do not update either; call this before persisting.
    An empty structure keeps a read time of 0.
    """
    word_count = compute_word_count(structure.blocks)
    minutes = estimate_read_minutes(word_count, words_per_minute) if structure.blocks else 0
    return structure.model_copy(update={'word_count': word_count, 'estimated_read_minutes': minutes})
