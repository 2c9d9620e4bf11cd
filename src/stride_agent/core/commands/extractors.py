"""
Substring pickers shared by the slot extractors.
"""

import re
from typing import Iterable, Optional

DOUBLE_QUOTED_PATTERN = re.compile(r'"([^"]+)"')
SINGLE_QUOTED_PATTERN = re.compile(r"'([^']+)'")
LEADING_SEPARATORS = re.compile(r'^[:\-\s]+')


def extract_quoted(text: str) -> Optional[str]:
    """
    Return the first quoted substring of ``text``.

    Any double-quoted substring wins over single-quoted ones, so an
    apostrophe elsewhere in the text cannot steal the title.
    """
    for pattern in (DOUBLE_QUOTED_PATTERN, SINGLE_QUOTED_PATTERN):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def keyword_pattern(keyword: str) -> re.Pattern:
    """Case-insensitive pattern for ``keyword``, word-bounded where it starts or ends with a word character."""
    pattern = re.escape(keyword)
    if re.match(r'\w', keyword):
        pattern = r'\b' + pattern
    if re.search(r'\w$', keyword):
        pattern = pattern + r'\b'
    return re.compile(pattern, re.IGNORECASE)


def extract_after_keywords(text: str, keywords: Iterable[str]) -> Optional[str]:
    """
    Return the text following the first keyword (in priority order) that occurs.

    Leading ``:``, ``-`` and whitespace are stripped from the remainder.
    Keywords whose remainder is empty are skipped.
    """
    for keyword in keywords:
        match = keyword_pattern(keyword).search(text)
        if not match:
            continue
        remainder = LEADING_SEPARATORS.sub('', text[match.end():]).strip()
        if remainder:
            return remainder
    return None


def contains_word(text: str, *words: str) -> bool:
    """True when any of ``words`` occurs in ``text`` as a whole word, ignoring case."""
    return any(keyword_pattern(word).search(text) for word in words)
