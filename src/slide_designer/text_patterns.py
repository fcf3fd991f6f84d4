"""Classification primitives shared by the content analyzer and layout engine.

Both components reason about the same signals (how many words, whether the
text reads like statistics, a process or a comparison), so the regular
expression families live here once.
"""

import re
from typing import Iterable, Sequence

# Statistical data: percentages, money, decimals, multipliers, trend and
# comparison wording.
STATISTICAL_PATTERNS = (
    re.compile(r'\d+%'),
    re.compile(r'\$[\d,]+'),
    re.compile(r'\d+\.\d+'),
    re.compile(r'\d+x', re.IGNORECASE),
    re.compile(r'increase|decrease|growth|decline', re.IGNORECASE),
    re.compile(r'compared to|versus|vs\.', re.IGNORECASE),
)

# A bullet that opens with an ordinal, step, phase or stage marker
PROCESS_PATTERNS = (
    re.compile(r'^(first|second|third|then|next|finally)', re.IGNORECASE),
    re.compile(r'^step \d+', re.IGNORECASE),
    re.compile(r'^phase \d+', re.IGNORECASE),
    re.compile(r'^stage \d+', re.IGNORECASE),
    re.compile(r'^\d+\.'),
)

# Fraction of bullets that must carry a process marker
PROCESS_RATIO = 0.5

COMPARISON_KEYWORDS = (
    'versus', 'vs.', 'vs', 'compared to', 'different from',
    'better than', 'worse than', 'instead of', 'rather than',
    'advantage', 'disadvantage', 'pro', 'con', 'benefit', 'drawback',
)

# Keywords are matched as whole words so that "pro" does not fire on
# "product" or "con" on "content"; plurals are accepted.
_COMPARISON_RE = re.compile(
    r'(?<!\w)(?:' + '|'.join(re.escape(k) for k in COMPARISON_KEYWORDS) + r')s?(?!\w)',
    re.IGNORECASE,
)

STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'are', 'was', 'were', 'be',
    'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did', 'will',
    'would', 'should', 'could', 'may', 'might', 'must', 'can', 'this',
    'that', 'these', 'those', 'it', 'its', 'they', 'them', 'their',
})

_SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
_NON_WORD_RE = re.compile(r'[^\w\s]')


def count_words(text: str) -> int:
    """Count whitespace-separated tokens, ignoring empty ones."""
    return len(text.split())


def count_bullet_words(bullets: Iterable[str]) -> int:
    """Total word count across a sequence of bullets."""
    return sum(count_words(bullet) for bullet in bullets)


def split_sentences(text: str) -> list[str]:
    """Split text on terminal punctuation, dropping blank fragments."""
    return [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def has_statistical_content(bullets: Sequence[str]) -> bool:
    """True if any bullet carries a numeric, trend or comparison signal."""
    return any(
        pattern.search(text)
        for text in bullets
        for pattern in STATISTICAL_PATTERNS
    )


def is_process_step(text: str) -> bool:
    stripped = text.strip()
    return any(pattern.search(stripped) for pattern in PROCESS_PATTERNS)


def has_process_content(bullets: Sequence[str]) -> bool:
    """True if at least half of the bullets open with a process marker.

    A slide with no bullets is never a process.
    """
    if not bullets:
        return False
    matches = sum(1 for text in bullets if is_process_step(text))
    return matches >= len(bullets) * PROCESS_RATIO


def has_comparison_content(bullets: Sequence[str]) -> bool:
    """True if the bullets use any comparison keyword."""
    return bool(_COMPARISON_RE.search(' '.join(bullets)))


def extract_keyword(text: str) -> str:
    """Pick the first significant word of a bullet for icon/image search.

    Words of four letters or more that are not stop words qualify; if none
    do, the first raw token is returned.
    """
    words = [
        word for word in _NON_WORD_RE.sub('', text.lower()).split()
        if len(word) > 3 and word not in STOP_WORDS
    ]
    if words:
        return words[0]
    tokens = text.split()
    return tokens[0] if tokens else ''
