"""Plain-text helpers: markup stripping, word counts, and read-time estimates"""

import math
import re


TAG_RE = re.compile(r'<[^>]*>')
WHITESPACE_RE = re.compile(r'\s+')
WORDS_PER_MINUTE = 200


def strip_markup(html: str) -> str:
    """Remove every tag, keeping inner text. Entities are left as written."""
    return TAG_RE.sub('', html).strip()


def count_words(text: str) -> int:
    """Count whitespace-separated tokens in the stripped text."""
    return len([w for w in WHITESPACE_RE.split(strip_markup(text)) if w])


def estimate_read_minutes(word_count: int, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Whole minutes to read word_count words; never less than 1."""
    return max(1, math.ceil(word_count / words_per_minute))
