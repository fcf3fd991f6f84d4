"""Quality scoring for assembled presentations.

Four check families (design, content, accessibility, performance) each run a
set of named checks. A check is any callable taking a Presentation and
returning a CheckResult (or an awaitable of one), so a family member can be
swapped for a real implementation without touching aggregation:

    >>> checker = QualityChecker(min_score=75)
    >>> checker.register_check('content', 'grammar', my_grammar_check)
    >>> report = await checker.check_presentation(presentation)
    >>> print(format_report(report))

Category score is the mean of its checks. The overall score weights the
categories design 30%, content 30%, accessibility 25%, performance 15%.
"""

import inspect
import logging
import math
import re
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Union

from .html_media import extract_font_sizes, has_keyboard_handlers, inspect_markup
from .models import (
    CategoryResult,
    CheckResult,
    InvalidInputError,
    OverallResult,
    Presentation,
    QualityReport,
    clamp_score,
)
from .text_patterns import count_words, split_sentences

logger = logging.getLogger(__name__)

CheckFn = Callable[[Presentation], Union[CheckResult, Awaitable[CheckResult]]]

# WCAG AA minimum for body text
CONTRAST_THRESHOLD = 4.5
MAX_CONTRAST = 21.0

MAX_FONT_SIZES = 6
MAX_LAYOUTS = 5
MAX_WORDS_PER_SENTENCE = 20
MAX_WORDS_PER_SLIDE = 50
MAX_BULLETS_PER_SLIDE = 7
MAX_SIZE_KB = 500
MAX_LOAD_SECONDS = 2
KB_PER_SECOND = 1000
MAX_INLINE_STYLES = 50

DEFAULT_MIN_SCORE = 70

# Percent weights; the weighted sum is divided by 100 once
CATEGORY_WEIGHTS = {
    'design': 30,
    'content': 30,
    'accessibility': 25,
    'performance': 15,
}

GRADE_THRESHOLDS = ((90, 'A'), (80, 'B'), (70, 'C'), (60, 'D'))

# (category, check, score below which to recommend, recommendation)
RECOMMENDATION_RULES = (
    ('design', 'color_contrast', 80, 'Improve color contrast for better readability'),
    ('design', 'consistency', 80, 'Use more consistent layouts across slides'),
    ('content', 'word_count', 80, 'Reduce text density on slides'),
    ('content', 'bullet_points', 80, 'Limit bullet points to 5-7 per slide'),
    ('accessibility', 'alt_text', 100, 'Add descriptive alt text to all images'),
    ('accessibility', 'keyboard_nav', 100, 'Implement keyboard navigation'),
    ('performance', 'file_size', 80, 'Optimize file size for faster loading'),
)

CATEGORY_TITLES = {
    'design': 'Design Quality',
    'content': 'Content Quality',
    'accessibility': 'Accessibility',
    'performance': 'Performance',
}

CHECK_LABELS = {
    'color_contrast': 'Color Contrast',
    'typography': 'Typography',
    'spacing': 'Spacing',
    'consistency': 'Consistency',
    'visual_balance': 'Visual Balance',
    'readability': 'Readability',
    'word_count': 'Word Count',
    'bullet_points': 'Bullet Points',
    'coherence': 'Coherence',
    'grammar': 'Grammar',
    'contrast': 'Contrast',
    'alt_text': 'Alt Text',
    'semantic_html': 'Semantic HTML',
    'keyboard_nav': 'Keyboard Nav',
    'screen_reader': 'Screen Reader',
    'file_size': 'File Size',
    'load_time': 'Load Time',
    'image_optimization': 'Image Optimization',
    'code_efficiency': 'Code Efficiency',
}

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
_BULLET_LINE_RE = re.compile(r'^\s*[-*]\s', re.MULTILINE)


# =============================================================================
# Colour contrast
# =============================================================================

def parse_hex_color(color: str) -> tuple[int, int, int]:
    """Parse '#rrggbb' or '#rgb' into an (r, g, b) tuple of 0-255 ints.

    Raises:
        InvalidInputError: If the string is not a hex colour.
    """
    match = _HEX_RE.match(color.strip()) if isinstance(color, str) else None
    if not match:
        raise InvalidInputError(f"Invalid hex color: {color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = ''.join(ch * 2 for ch in digits)
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def _linearize(channel: int) -> float:
    value = channel / 255
    if value <= 0.03928:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """WCAG relative luminance of a hex colour, in [0, 1]."""
    r, g, b = (_linearize(c) for c in parse_hex_color(color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(background: str, foreground: str) -> float:
    """WCAG contrast ratio between two hex colours, in [1, 21]."""
    bg_lum = relative_luminance(background)
    fg_lum = relative_luminance(foreground)
    lighter = max(bg_lum, fg_lum)
    darker = min(bg_lum, fg_lum)
    return (lighter + 0.05) / (darker + 0.05)


# =============================================================================
# Design checks
# =============================================================================

def check_color_contrast(presentation: Presentation) -> CheckResult:
    """Every slide with both colours set must reach 4.5:1.

    The score scales linearly with the lowest ratio found below threshold.
    """
    lowest = MAX_CONTRAST
    checked = 0
    for slide in presentation.slides:
        if slide.background_color and slide.text_color:
            lowest = min(lowest, contrast_ratio(slide.background_color, slide.text_color))
            checked += 1

    passed = lowest >= CONTRAST_THRESHOLD
    return CheckResult(
        passed=passed,
        score=100 if passed else (lowest / CONTRAST_THRESHOLD) * 100,
        message=(
            'Color contrast meets WCAG AA standards' if passed
            else f'Color contrast too low ({lowest:.2f}:1, need {CONTRAST_THRESHOLD}:1)'
        ),
        details={'lowest_contrast': lowest, 'slides_checked': checked},
    )


def check_typography(presentation: Presentation) -> CheckResult:
    font_sizes: set[int] = set()
    for slide in presentation.slides:
        font_sizes |= extract_font_sizes(slide.content)
    font_sizes |= inspect_markup(presentation.html).font_sizes

    issues = []
    if len(font_sizes) > MAX_FONT_SIZES:
        issues.append('Too many different font sizes')

    passed = not issues
    return CheckResult(
        passed=passed,
        score=100 - len(issues) * 20,
        message=(
            'Typography is consistent and well-structured' if passed
            else f"Typography issues found: {', '.join(issues)}"
        ),
        details={'font_size_variety': len(font_sizes), 'issues': issues},
    )


def check_spacing(presentation: Presentation) -> CheckResult:
    """Extension point: no spacing measurement is performed yet."""
    return CheckResult(passed=True, score=100, message='Spacing is appropriate and consistent')


def check_layout_consistency(presentation: Presentation) -> CheckResult:
    layouts = {slide.layout for slide in presentation.slides}
    passed = len(layouts) <= MAX_LAYOUTS
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (len(layouts) - MAX_LAYOUTS) * 10,
        message=(
            'Slide layouts are consistent' if passed
            else f'Too many different layouts ({len(layouts)})'
        ),
        details={'layout_variety': len(layouts)},
    )


def check_visual_balance(presentation: Presentation) -> CheckResult:
    """Extension point: fixed score until a real balance measure exists."""
    return CheckResult(passed=True, score=95, message='Visual balance is good across slides')


# =============================================================================
# Content checks
# =============================================================================

def check_readability(presentation: Presentation) -> CheckResult:
    total_words = sum(count_words(slide.content) for slide in presentation.slides)
    total_sentences = sum(len(split_sentences(slide.content)) for slide in presentation.slides)

    avg = total_words / max(1, total_sentences)
    passed = avg <= MAX_WORDS_PER_SENTENCE
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (avg - MAX_WORDS_PER_SENTENCE) * 5,
        message=(
            'Content is easily readable' if passed
            else f'Sentences are too long (avg {avg:.1f} words)'
        ),
        details={'avg_words_per_sentence': avg},
    )


def check_word_count(presentation: Presentation) -> CheckResult:
    counts = [count_words(slide.content) for slide in presentation.slides]
    max_words = max(counts, default=0)
    avg_words = sum(counts) / len(counts) if counts else 0.0

    passed = max_words <= MAX_WORDS_PER_SLIDE
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (max_words - MAX_WORDS_PER_SLIDE) * 2,
        message=(
            'Word count is appropriate for slides' if passed
            else f'Some slides have too many words (max: {max_words})'
        ),
        details={'avg_words': avg_words, 'max_words': max_words},
    )


def check_bullet_density(presentation: Presentation) -> CheckResult:
    max_bullets = max(
        (len(_BULLET_LINE_RE.findall(slide.content)) for slide in presentation.slides),
        default=0,
    )
    passed = max_bullets <= MAX_BULLETS_PER_SLIDE
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (max_bullets - MAX_BULLETS_PER_SLIDE) * 10,
        message=(
            'Bullet points are well-structured' if passed
            else f'Some slides have too many bullets (max: {max_bullets})'
        ),
        details={'max_bullets': max_bullets},
    )


def check_coherence(presentation: Presentation) -> CheckResult:
    """Extension point for an NLP coherence measure; fixed score for now."""
    return CheckResult(passed=True, score=90, message='Content flows logically between slides')


def check_grammar(presentation: Presentation) -> CheckResult:
    """Extension point for a grammar checker; fixed score for now."""
    return CheckResult(passed=True, score=95, message='No major grammar issues detected')


# =============================================================================
# Accessibility checks
# =============================================================================

def check_alt_text(presentation: Presentation) -> CheckResult:
    total = 0
    missing = 0
    for slide in presentation.slides:
        total += len(slide.images)
        missing += sum(1 for image in slide.images if not (image.alt or '').strip())

    passed = missing == 0
    return CheckResult(
        passed=passed,
        score=((total - missing) / total) * 100 if total else 100,
        message=(
            'All images have descriptive alt text' if passed
            else f'{missing} images missing alt text'
        ),
        details={'total_images': total, 'missing_alt': missing},
    )


def check_semantic_structure(presentation: Presentation) -> CheckResult:
    headings = inspect_markup(presentation.html).headings
    passed = bool(headings)
    return CheckResult(
        passed=passed,
        score=100 if passed else 50,
        message=(
            'HTML uses semantic elements properly' if passed
            else 'HTML should use more semantic elements'
        ),
        details={'headings': len(headings)},
    )


def check_keyboard_navigation(presentation: Presentation) -> CheckResult:
    passed = has_keyboard_handlers(presentation.html)
    return CheckResult(
        passed=passed,
        score=100 if passed else 0,
        message=(
            'Keyboard navigation is supported' if passed
            else 'Add keyboard navigation support'
        ),
    )


def check_screen_reader(presentation: Presentation) -> CheckResult:
    """Extension point for a live screen-reader audit; fixed score for now."""
    return CheckResult(passed=True, score=90, message='Screen reader compatibility is good')


# =============================================================================
# Performance checks
# =============================================================================

def _size_kb(presentation: Presentation) -> float:
    size = len(presentation.html.encode('utf-8')) + len(presentation.css.encode('utf-8'))
    return size / 1024


def check_file_size(presentation: Presentation) -> CheckResult:
    size_kb = _size_kb(presentation)
    passed = size_kb <= MAX_SIZE_KB
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (size_kb - MAX_SIZE_KB) / 10,
        message=(
            f'File size is optimal ({size_kb:.2f} KB)' if passed
            else f'File size is large ({size_kb:.2f} KB)'
        ),
        details={'size_kb': size_kb},
    )


def check_load_time(presentation: Presentation) -> CheckResult:
    seconds = _size_kb(presentation) / KB_PER_SECOND
    passed = seconds <= MAX_LOAD_SECONDS
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (seconds - MAX_LOAD_SECONDS) * 20,
        message=(
            f'Estimated load time: {seconds:.2f}s' if passed
            else f'Load time may be slow: {seconds:.2f}s'
        ),
        details={'estimated_load_time': seconds},
    )


def check_image_optimization(presentation: Presentation) -> CheckResult:
    """Extension point: images are not fetched, so all count as optimized."""
    total = sum(len(slide.images) for slide in presentation.slides)
    return CheckResult(
        passed=True,
        score=100,
        message=f'{total} images are optimized',
        details={'total_images': total},
    )


def check_code_efficiency(presentation: Presentation) -> CheckResult:
    inline_styles = inspect_markup(presentation.html).inline_styles
    passed = inline_styles < MAX_INLINE_STYLES
    return CheckResult(
        passed=passed,
        score=100 if passed else 100 - (inline_styles - MAX_INLINE_STYLES),
        message=(
            'Code is efficient and well-structured' if passed
            else 'Consider reducing inline styles'
        ),
        details={'inline_styles': inline_styles},
    )


DEFAULT_CHECKS: Mapping[str, Mapping[str, CheckFn]] = MappingProxyType({
    'design': MappingProxyType({
        'color_contrast': check_color_contrast,
        'typography': check_typography,
        'spacing': check_spacing,
        'consistency': check_layout_consistency,
        'visual_balance': check_visual_balance,
    }),
    'content': MappingProxyType({
        'readability': check_readability,
        'word_count': check_word_count,
        'bullet_points': check_bullet_density,
        'coherence': check_coherence,
        'grammar': check_grammar,
    }),
    'accessibility': MappingProxyType({
        'contrast': check_color_contrast,
        'alt_text': check_alt_text,
        'semantic_html': check_semantic_structure,
        'keyboard_nav': check_keyboard_navigation,
        'screen_reader': check_screen_reader,
    }),
    'performance': MappingProxyType({
        'file_size': check_file_size,
        'load_time': check_load_time,
        'image_optimization': check_image_optimization,
        'code_efficiency': check_code_efficiency,
    }),
})


# =============================================================================
# Aggregation
# =============================================================================

def calculate_category_score(checks: Mapping[str, CheckResult]) -> float:
    """Arithmetic mean of the check scores (100 for an empty family)."""
    if not checks:
        return 100.0
    return clamp_score(math.fsum(c.score for c in checks.values()) / len(checks))


def calculate_overall_score(category_scores: Mapping[str, float]) -> float:
    """Weighted sum of the four category scores."""
    weighted = math.fsum(
        category_scores[name] * weight for name, weight in CATEGORY_WEIGHTS.items()
    )
    return clamp_score(weighted / 100)


def grade_for_score(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return 'F'


def generate_recommendations(categories: Mapping[str, CategoryResult]) -> tuple[str, ...]:
    """Apply the threshold triggers in order; each check yields at most one."""
    recommendations = []
    for category, check_name, threshold, message in RECOMMENDATION_RULES:
        check = categories[category].checks.get(check_name)
        if check is not None and check.score < threshold:
            recommendations.append(message)
    return tuple(recommendations)


class QualityChecker:
    """Score a Presentation across the four check families.

    Holds no state between calls other than its configuration, so one
    instance can validate any number of presentations, concurrently or not.
    """

    def __init__(
        self,
        min_score: float = DEFAULT_MIN_SCORE,
        checks: Mapping[str, Mapping[str, CheckFn]] | None = None,
    ):
        """Initialize the checker.

        Args:
            min_score: Overall score needed to pass, in [0, 100].
            checks: Optional replacement registry, keyed by category then
                check name. Defaults to DEFAULT_CHECKS.

        Raises:
            ValueError: If min_score is out of range or a category is unknown.
        """
        if isinstance(min_score, bool) or not isinstance(min_score, (int, float)):
            raise ValueError(f"min_score must be a number, got {min_score!r}")
        if not 0 <= min_score <= 100:
            raise ValueError(f"min_score must be between 0 and 100, got {min_score}")
        self.min_score = min_score

        registry = checks if checks is not None else DEFAULT_CHECKS
        unknown = set(registry) - set(CATEGORY_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown check categories: {', '.join(sorted(unknown))}")
        self._checks = {
            category: dict(registry.get(category, {})) for category in CATEGORY_WEIGHTS
        }

    @classmethod
    def from_config(cls, config) -> "QualityChecker":
        """Create a checker using 'quality.min_score' from a Config."""
        return cls(min_score=config.min_score)

    def register_check(self, category: str, name: str, check: CheckFn) -> None:
        """Add or replace a named check within a family on this instance."""
        if category not in self._checks:
            raise ValueError(
                f"Unknown check category '{category}'. "
                f"Available: {', '.join(self._checks)}"
            )
        self._checks[category][name] = check

    async def check_presentation(self, presentation: Presentation) -> QualityReport:
        """Run every check family and aggregate the results.

        Args:
            presentation: Assembled presentation; never modified.

        Returns:
            A fresh QualityReport.

        Raises:
            InvalidInputError: If the input is not a Presentation or holds
                malformed colours.
        """
        if not isinstance(presentation, Presentation):
            raise InvalidInputError(
                f"Expected a Presentation, got {type(presentation).__name__}"
            )

        categories = {}
        for category in CATEGORY_WEIGHTS:
            categories[category] = await self._run_category(category, presentation)

        score = calculate_overall_score({name: c.score for name, c in categories.items()})
        overall = OverallResult(
            score=score,
            grade=grade_for_score(score),
            passed=score >= self.min_score,
        )
        logger.info(
            f"Quality check for '{presentation.title}': {score:.1f}/100 "
            f"(grade {overall.grade}, {'passed' if overall.passed else 'failed'})"
        )

        return QualityReport(
            overall=overall,
            recommendations=generate_recommendations(categories),
            **categories,
        )

    async def _run_category(self, category: str, presentation: Presentation) -> CategoryResult:
        results = {}
        for name, check in self._checks[category].items():
            result = check(presentation)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, CheckResult):
                raise TypeError(
                    f"Check '{category}.{name}' returned {type(result).__name__}, "
                    f"expected CheckResult"
                )
            if not result.passed:
                logger.debug(f"  {category}.{name} failed: {result.message}")
            results[name] = result
        return CategoryResult(score=calculate_category_score(results), checks=results)

    async def generate_report(self, presentation: Presentation) -> str:
        """Check a presentation and format the result as text."""
        return format_report(await self.check_presentation(presentation))


def _mark(passed: bool) -> str:
    return '✓' if passed else '✗'


def format_report(report: QualityReport) -> str:
    """Render a QualityReport as a human-readable text summary."""
    overall = report.overall
    lines = [
        '# Presentation Quality Report',
        '',
        f'## Overall Score: {overall.score:.1f}/100 (Grade {overall.grade})',
        f"{_mark(overall.passed)} {'PASSED' if overall.passed else 'FAILED'}",
    ]

    for name, category in report.categories().items():
        lines.append('')
        lines.append(f'## {CATEGORY_TITLES[name]}: {category.score:.1f}/100')
        for check_name, check in category.checks.items():
            label = CHECK_LABELS.get(check_name, check_name.replace('_', ' ').title())
            lines.append(f'- {label}: {check.score:.1f}/100 {_mark(check.passed)}')

    if report.recommendations:
        lines.append('')
        lines.append('## Recommendations')
        lines.extend(f'{i}. {text}' for i, text in enumerate(report.recommendations, start=1))

    return '\n'.join(lines)
