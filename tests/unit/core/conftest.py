"""Shared fixtures for core unit tests"""

import pytest

from postblocks.core.editor import add_block
from postblocks.core.structure import create_empty_structure, parse


SAMPLE_HTML = """\
<h1>Guide</h1>
<p>Intro text here.</p>
<h2 id="setup">Setup Steps</h2>
<pre><code class="language-python">print("hi")</code></pre>
<figure><img src="/a.png" alt="A" width="640" height="480"><figcaption>Figure <em>one</em></figcaption></figure>
<ul><li>First</li><li>Second</li></ul>
<h3>Kính Low-E</h3>
<table><thead><tr><th>Name</th><th>Value</th></tr></thead><tbody><tr><td>a</td><td>1</td></tr></tbody></table>
<blockquote><p>Quoted words</p></blockquote>
<ol><li>One</li></ol>
<img src="/b.png" alt="B">
<p>Closing.</p>
"""


@pytest.fixture(name="sample_html")
def sample_html_fixture():
    return SAMPLE_HTML


@pytest.fixture(name="sample_structure")
def sample_structure_fixture():
    return parse(SAMPLE_HTML)


@pytest.fixture(name="abc")
def abc_fixture():
    """A structure of three paragraphs A, B, C."""
    s = create_empty_structure()
    for text in ("A", "B", "C"):
        s = add_block(s, {"type": "paragraph", "text": text})
    return s


@pytest.fixture(name="content")
def content_fixture():
    """Block contents without identity/position, for value comparisons."""
    def _content(structure) -> list[dict]:
        return [b.model_dump(exclude={"id", "order"}) for b in structure.blocks]
    return _content
