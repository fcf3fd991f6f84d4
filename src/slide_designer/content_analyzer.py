"""Content analysis for slide text.

Extracts structural and semantic signals from a block of text: counts,
list/quote/code/number detection, complexity tier, tone, key points and
asset suggestions. The layout engine and deck designer use these signals to
decide how visual a slide should be.

Typical usage:
    >>> analyzer = ContentAnalyzer()
    >>> analysis = analyzer.analyze("- Revenue grew\\n- Costs fell\\n- Margin widened")
    >>> analysis.has_lists
    True
    >>> analyzer.get_recommended_visual_count(analysis)
    1
"""

import logging
import re

from .models import AssetSuggestion, ContentAnalysis, SlideContent
from .text_patterns import count_words, split_sentences

logger = logging.getLogger(__name__)

LIST_PATTERNS = (
    re.compile(r'^[-*+]\s+', re.MULTILINE),          # Bullet points
    re.compile(r'^\d+\.\s+', re.MULTILINE),          # Numbered lists
    re.compile(r'^[a-z]\)\s+', re.MULTILINE | re.IGNORECASE),  # Lettered lists
    re.compile(r'<ul>|<ol>|<li>', re.IGNORECASE),    # HTML lists
)

QUOTE_PATTERNS = (
    re.compile(r'["\'“”‘’].*["\'“”‘’]'),
    re.compile(r'^>\s+', re.MULTILINE),
    re.compile(r'\b(said|stated)\b', re.IGNORECASE),
)

CODE_PATTERNS = (
    re.compile(r'```[\s\S]*```'),
    re.compile(r'`[^`]+`'),
    re.compile(r'<code>|<pre>', re.IGNORECASE),
    re.compile(r'\b(function|class|const|let|var|import|export)\b', re.IGNORECASE),
)

NUMBER_RE = re.compile(r'\b\d+([.,]\d+)?%?\b')
MIN_SIGNIFICANT_NUMBERS = 3

# Complexity thresholds: (word count, average word length, long-word ratio)
SIMPLE_LIMITS = (50, 6, 0.1)
COMPLEX_LIMITS = (150, 7, 0.3)
LONG_WORD_LENGTH = 8

TONE_INDICATORS = {
    'formal': ('furthermore', 'therefore', 'consequently', 'hereby', 'wherein'),
    'casual': ('you', 'we', "let's", 'easy', 'simple', 'great'),
    'technical': ('algorithm', 'function', 'data', 'system', 'process', 'implementation'),
}

KEY_PHRASES = ('important', 'key', 'critical', 'essential', 'must', 'should')
MAX_KEY_POINTS = 5
FALLBACK_SENTENCES = 3

BULLET_ITEM_RE = re.compile(r'^[-*+]\s+(.+)$', re.MULTILINE)
NUMBERED_ITEM_RE = re.compile(r'^\d+\.\s+(.+)$', re.MULTILINE)

# Topic keywords → asset hint. Order is the tie-break order for equal relevance.
ASSET_MAPPINGS = (
    {
        'keywords': ('team', 'people', 'collaboration', 'group'),
        'type': 'image',
        'description': 'Team collaboration or group of people',
        'search_query': 'professional team collaboration',
        'relevance': 0.9,
    },
    {
        'keywords': ('technology', 'computer', 'software', 'digital'),
        'type': 'image',
        'description': 'Technology or digital concept',
        'search_query': 'modern technology workspace',
        'relevance': 0.85,
    },
    {
        'keywords': ('growth', 'increase', 'success', 'achievement'),
        'type': 'icon',
        'description': 'Growth or upward trend icon',
        'search_query': 'growth chart icon',
        'relevance': 0.8,
    },
    {
        'keywords': ('data', 'analytics', 'metrics', 'statistics'),
        'type': 'chart',
        'description': 'Data visualization or chart',
        'search_query': 'data analytics dashboard',
        'relevance': 0.9,
    },
    {
        'keywords': ('security', 'protection', 'safety', 'privacy'),
        'type': 'icon',
        'description': 'Security or protection icon',
        'search_query': 'security shield icon',
        'relevance': 0.85,
    },
    {
        'keywords': ('innovation', 'idea', 'creative', 'design'),
        'type': 'image',
        'description': 'Creative or innovative concept',
        'search_query': 'innovation lightbulb creative',
        'relevance': 0.8,
    },
    {
        'keywords': ('business', 'corporate', 'professional', 'office'),
        'type': 'image',
        'description': 'Business or professional setting',
        'search_query': 'modern business office',
        'relevance': 0.75,
    },
)
MAX_ASSET_SUGGESTIONS = 3


def _word_pattern(words) -> re.Pattern:
    return re.compile(
        r'(?<!\w)(?:' + '|'.join(re.escape(w) for w in words) + r')(?!\w)',
        re.IGNORECASE,
    )


_TONE_RES = {
    tone: tuple(_word_pattern([word]) for word in words)
    for tone, words in TONE_INDICATORS.items()
}
_KEY_PHRASE_RE = _word_pattern(KEY_PHRASES)


class ContentAnalyzer:
    """Rule-based analyzer for slide text.

    Stateless; one instance may be shared or a fresh one created per call
    site. Every method is a pure function of its arguments.
    """

    def analyze(self, content: str) -> ContentAnalysis:
        """Perform the full analysis of a block of text.

        Args:
            content: Raw slide text (may be empty).

        Returns:
            ContentAnalysis snapshot.
        """
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, got {type(content).__name__}")

        word_count = count_words(content)
        key_points = self.extract_key_points(content)

        analysis = ContentAnalysis(
            word_count=word_count,
            sentence_count=self.count_sentences(content),
            has_lists=self.detect_lists(content),
            has_quotes=self.detect_quotes(content),
            has_code=self.detect_code(content),
            has_numbers=self.detect_numbers(content),
            complexity=self.determine_complexity(content),
            tone=self.detect_tone(content),
            key_points=key_points,
            suggested_assets=self.suggest_assets(content),
        )
        logger.debug(
            f"Analyzed {word_count} words: complexity={analysis.complexity}, "
            f"tone={analysis.tone}, assets={len(analysis.suggested_assets)}"
        )
        return analysis

    def analyze_slide(self, slide: SlideContent) -> ContentAnalysis:
        """Analyze a slide's title followed by its bullets as a '- ' list."""
        lines = [slide.title] + [f"- {bullet}" for bullet in slide.content]
        return self.analyze('\n'.join(lines))

    # -------------------------------------------------------------------------
    # Individual signals
    # -------------------------------------------------------------------------

    @staticmethod
    def count_sentences(content: str) -> int:
        """Count runs of terminal punctuation; unpunctuated text is one sentence.

        Blank text has zero sentences.
        """
        if not content.strip():
            return 0
        return max(1, len(re.findall(r'[.!?]+', content)))

    @staticmethod
    def detect_lists(content: str) -> bool:
        return any(pattern.search(content) for pattern in LIST_PATTERNS)

    @staticmethod
    def detect_quotes(content: str) -> bool:
        return any(pattern.search(content) for pattern in QUOTE_PATTERNS)

    @staticmethod
    def detect_code(content: str) -> bool:
        return any(pattern.search(content) for pattern in CODE_PATTERNS)

    @staticmethod
    def detect_numbers(content: str) -> bool:
        """True if the text holds at least three standalone numbers or percentages."""
        matches = sum(1 for _ in NUMBER_RE.finditer(content))
        return matches >= MIN_SIGNIFICANT_NUMBERS

    @staticmethod
    def determine_complexity(content: str) -> str:
        """Bucket text into simple, medium or complex.

        Simple requires all three signals (word count, average word length,
        long-word ratio) to be low; any single strong signal makes it complex.
        """
        words = content.split()
        if not words:
            return 'simple'

        word_count = len(words)
        avg_length = sum(len(word) for word in words) / word_count
        long_ratio = sum(1 for word in words if len(word) > LONG_WORD_LENGTH) / word_count

        max_words, max_avg, max_ratio = SIMPLE_LIMITS
        if word_count < max_words and avg_length < max_avg and long_ratio < max_ratio:
            return 'simple'

        max_words, max_avg, max_ratio = COMPLEX_LIMITS
        if word_count > max_words or avg_length > max_avg or long_ratio > max_ratio:
            return 'complex'

        return 'medium'

    @staticmethod
    def detect_tone(content: str) -> str:
        """Pick the tone whose indicator words appear most often.

        Technical wins any tie it is part of; casual must strictly beat
        formal; formal is the default, including when nothing matches.
        """
        counts = {
            tone: sum(1 for pattern in patterns if pattern.search(content))
            for tone, patterns in _TONE_RES.items()
        }
        best = max(counts.values())
        if best == 0:
            return 'formal'
        if counts['technical'] == best:
            return 'technical'
        if counts['casual'] == best and counts['casual'] > counts['formal']:
            return 'casual'
        return 'formal'

    @staticmethod
    def extract_key_points(content: str) -> tuple[str, ...]:
        """Collect up to five key points.

        List items come first, then sentences containing a priority keyword.
        If nothing qualifies, the first three sentences are used.
        """
        items = BULLET_ITEM_RE.findall(content) or NUMBERED_ITEM_RE.findall(content)
        points = [item.strip() for item in items]

        sentences = [s.strip() for s in split_sentences(content)]
        for sentence in sentences:
            if _KEY_PHRASE_RE.search(sentence) and sentence not in points:
                points.append(sentence)

        if not points:
            points = sentences[:FALLBACK_SENTENCES]

        return tuple(points[:MAX_KEY_POINTS])

    @staticmethod
    def suggest_assets(content: str) -> tuple[AssetSuggestion, ...]:
        """Rank asset hints by keyword-match density, keeping the top three."""
        lower = content.lower()
        suggestions = []
        for mapping in ASSET_MAPPINGS:
            keywords = mapping['keywords']
            matched = sum(1 for keyword in keywords if keyword in lower)
            if matched:
                suggestions.append(AssetSuggestion(
                    type=mapping['type'],
                    description=mapping['description'],
                    relevance=mapping['relevance'] * (matched / len(keywords)),
                    search_query=mapping['search_query'],
                ))

        # sorted() is stable, so equal relevance keeps table order
        ranked = sorted(suggestions, key=lambda s: s.relevance, reverse=True)
        return tuple(ranked[:MAX_ASSET_SUGGESTIONS])

    # -------------------------------------------------------------------------
    # Helpers consumed by the layout engine
    # -------------------------------------------------------------------------

    @staticmethod
    def should_use_images(analysis: ContentAnalysis) -> bool:
        """Images suit descriptive, narrative text or explicit image hints."""
        has_image_hint = any(a.type == 'image' for a in analysis.suggested_assets)
        is_descriptive = analysis.word_count > 50 and analysis.complexity != 'complex'
        return has_image_hint or is_descriptive

    @staticmethod
    def should_use_icons(analysis: ContentAnalysis) -> bool:
        """Icons suit lists, technical or complex text, or explicit icon hints."""
        has_icon_hint = any(a.type == 'icon' for a in analysis.suggested_assets)
        is_complex = analysis.complexity == 'complex' or analysis.tone == 'technical'
        return has_icon_hint or analysis.has_lists or is_complex

    @staticmethod
    def get_recommended_visual_count(analysis: ContentAnalysis) -> int:
        if analysis.word_count < 30:
            return 1
        if analysis.word_count < 100:
            return 2
        if analysis.has_lists and len(analysis.key_points) > 3:
            return 3
        return 2
