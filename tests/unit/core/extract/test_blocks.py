"""Unit tests for core/extract/blocks.py"""

import pytest

from postblocks.core.extract.blocks import extract_blocks


def _types(html: str) -> list[str]:
    return [e.block.type for e in extract_blocks(html)]


def _only(html: str):
    extracted = extract_blocks(html)
    assert len(extracted) == 1, extracted
    return extracted[0].block


NESTED_HTML = (
    '<table><tr><td>Glass</td><td><img src="/in.png"></td></tr></table>'
    '<ul><li>Run <pre><code>make</code></pre></li><li>Then deploy</li></ul>'
    '<p>See the diagram <img src="/d.png" alt="d"> for details.</p>'
)


def _assert_disjoint(html: str) -> None:
    spans = sorted(span for e in extract_blocks(html) for span in e.claimed)
    assert spans
    for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
        assert prev_end <= next_start


def test_no_two_blocks_share_source(sample_html):
    """Claimed spans are pairwise disjoint."""
    _assert_disjoint(sample_html)


def test_nested_blocks_share_no_source():
    """Containers claim only the gaps around blocks nested inside them."""
    _assert_disjoint(NESTED_HTML)


def test_orders_follow_pass_sequence(sample_html):
    """Extractor order is a counter over passes: code, images, tables, lists, quotes, headings, paragraphs."""
    extracted = extract_blocks(sample_html)
    assert [e.block.order for e in extracted] == list(range(len(extracted)))
    assert [e.block.type for e in extracted] == [
        "code", "image", "image", "table", "list", "list", "quote",
        "heading", "heading", "heading", "paragraph", "paragraph",
    ]


def test_code_block_with_language():
    """<pre><code class="language-x"> captures the language and raw inner text."""
    block = _only('<pre><code class="hljs language-js">let a = 1;\n</code></pre>')
    assert block.type == "code"
    assert block.language == "js"
    assert block.text == "let a = 1;\n"


def test_code_block_without_language():
    """Code without a language class leaves language unset."""
    block = _only("<pre><code>x = 1</code></pre>")
    assert block.language is None


def test_code_contents_are_not_reparsed():
    """Markup inside a code block is not extracted as paragraphs or headings."""
    assert _types("<pre><code><h2>Title</h2><p>text</p></code></pre>") == ["code"]


def test_figure_with_caption():
    """A figure yields one image carrying its stripped caption and dimensions."""
    block = _only('<figure><img alt="Alt" src="/x.png" width="10" height="20" /><figcaption>A <b>cap</b></figcaption></figure>')
    assert block.type == "image"
    assert (block.url, block.alt, block.caption) == ("/x.png", "Alt", "A cap")
    assert (block.width, block.height) == (10, 20)


def test_bare_image():
    """A bare <img> yields an image without caption."""
    block = _only('<img src="/y.jpg">')
    assert block.url == "/y.jpg"
    assert block.alt == ""
    assert block.caption is None
    assert block.width is None


def test_image_without_src_is_discarded():
    """An <img> missing src produces no block."""
    assert extract_blocks('<img alt="nothing">') == []


def test_table_with_header_row():
    """The first all-<th> row becomes headers; later rows are stripped cells."""
    block = _only(
        "<table><thead><tr><th>A</th><th><b>B</b></th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr><tr><td>3</td><td>4</td></tr></tbody></table>"
    )
    assert block.headers == ["A", "B"]
    assert block.rows == [["1", "2"], ["3", "4"]]


def test_table_without_header_row():
    """A table with only <td> rows has empty headers."""
    block = _only("<table><tr><td>x</td></tr></table>")
    assert block.headers == []
    assert block.rows == [["x"]]


def test_empty_table_is_discarded():
    assert extract_blocks("<table><tr></tr></table>") == []


@pytest.mark.parametrize("html,kind", [
    ("<ul><li>a</li><li>b</li></ul>", "unordered"),
    ("<ol><li>a</li><li>b</li></ol>", "ordered"),
])
def test_lists(html, kind):
    """ul/ol map to list kinds with stripped items."""
    block = _only(html)
    assert block.kind == kind
    assert block.items == ["a", "b"]


def test_list_drops_empty_items():
    block = _only("<ul><li> </li><li><a href='#'>link</a></li></ul>")
    assert block.items == ["link"]


def test_quote_claims_inner_paragraph():
    """A blockquote's inner <p> is not extracted again as a paragraph."""
    assert _types("<blockquote><p>Said</p></blockquote>") == ["quote"]


def test_heading_explicit_id_is_anchor():
    """An id attribute on the heading is used as its anchor."""
    block = _only('<h2 class="x" id="custom-id">Some Title</h2>')
    assert block.level == 2
    assert block.anchor == "custom-id"


def test_heading_generated_anchor():
    """Without an id, the anchor is folded from the heading text."""
    block = _only("<h3>Kính <em>Low-E</em></h3>")
    assert block.text == "Kính Low-E"
    assert block.anchor == "kinh-low-e"


def test_paragraph_with_leading_inline_markup():
    """Paragraphs starting with inline tags are kept and stripped."""
    block = _only("<p><strong>Bold</strong> start</p>")
    assert block.text == "Bold start"


def test_paragraph_wrapping_block_tag_is_skipped():
    """A paragraph whose content opens with a block-level tag is not a paragraph."""
    assert extract_blocks("<p><div>wrapped</div></p>") == []


def test_pre_is_not_a_paragraph():
    """<pre> without <code> is not mistaken for <p>."""
    assert extract_blocks("<pre>plain</pre>") == []


@pytest.mark.parametrize("html", [
    "<p>   </p>",
    "<h2> </h2>",
    "<blockquote></blockquote>",
    "<pre><code>  \n</code></pre>",
    "<ul><li></li></ul>",
])
def test_empty_matches_are_discarded(html):
    """Matches with empty or whitespace-only content produce no block."""
    assert extract_blocks(html) == []


def test_table_takes_over_image_in_cell():
    """An image inside a table cell becomes part of the table, not a standalone block."""
    extracted = extract_blocks(
        '<table><tr><th>Item</th><th>Photo</th></tr>'
        '<tr><td>Glass</td><td><img src="/in.png"></td></tr></table>'
    )
    assert [e.block.type for e in extracted] == ["table"]
    table = extracted[0]
    assert table.block.headers == ["Item", "Photo"]
    assert table.block.rows == [["Glass", ""]]
    assert table.block.order == 0
    assert table.claimed == [(table.start, table.end)]


def test_paragraph_takes_over_inline_image():
    block = _only('<p>See the diagram <img src="/d.png" alt="d"> for the full wiring details.</p>')
    assert block.type == "paragraph"
    assert block.text == "See the diagram  for the full wiring details."


def test_paragraph_opening_with_image_leaves_image():
    """A <p> that only wraps an image is not prose, so the image block survives."""
    block = _only('<p><img src="/x.png"> After</p>')
    assert block.type == "image"
    assert block.url == "/x.png"


def test_list_keeps_text_around_nested_code():
    """Code inside a list item keeps its own block; the list keeps the remaining text."""
    extracted = extract_blocks('<ul><li>Run <pre><code>make</code></pre></li><li>Then deploy</li></ul>')
    code, items = (e.block for e in extracted)
    assert (code.type, code.text) == ("code", "make")
    assert (items.type, items.items) == ("list", ["Run", "Then deploy"])
    list_span = extracted[1]
    code_span = (extracted[0].start, extracted[0].end)
    assert list_span.claimed == [(list_span.start, code_span[0]), (code_span[1], list_span.end)]


def test_match_straddling_a_claim_is_skipped():
    """A match that only partly overlaps an earlier claim is dropped."""
    assert _types("<p>a <pre><code>x</p></code></pre>") == ["code"]


def test_unrecognized_markup_is_dropped():
    """Unknown tags contribute no blocks and raise nothing."""
    assert extract_blocks("<section><span>loose</span></section>") == []
