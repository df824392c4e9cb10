"""Identifier generation: heading anchors and article slugs"""

import re
import unicodedata


ANCHOR_MAX_LENGTH = 50
SLUG_MAX_LENGTH = 60

# Letters that NFD leaves intact (no combining mark to drop).
EXTRA_FOLDS = str.maketrans({'đ': 'd', 'Đ': 'D', 'ø': 'o', 'Ø': 'O', 'ł': 'l', 'Ł': 'L', 'ß': 'ss'})

_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')


def fold_diacritics(text: str) -> str:
    """Decompose to NFD, drop combining marks, then apply the extra single-letter folds."""
    decomposed = unicodedata.normalize('NFD', text)
    stripped = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.translate(EXTRA_FOLDS)


def fold_for_anchor(text: str, max_length: int = ANCHOR_MAX_LENGTH) -> str:
    """Convert heading text to a URL-fragment-safe anchor, e.g. 'Kính Low-E' -> 'kinh-low-e'."""
    folded = fold_diacritics(text.lower())
    anchor = _NON_ALNUM_RE.sub('-', folded).strip('-')
    return anchor[:max_length]


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug.

    Long slugs are cut at max_length; when the cut lands mid-word close to the
    end, the partial word is dropped.
    """
    slug = _NON_ALNUM_RE.sub('-', fold_diacritics(text.lower())).strip('-')
    if len(slug) > max_length:
        slug = slug[:max_length]
        last_hyphen = slug.rfind('-')
        if last_hyphen > max_length - 10:
            slug = slug[:last_hyphen]
        slug = slug.rstrip('-')
    return slug
