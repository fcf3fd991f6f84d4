"""Layout decision engine.

Turns a SlideContent and its position in the deck into a SlideDesign:

    1. decide_layout          → LayoutType (ordered rule table)
    2. decide_visual_elements → VisualElement placements for that layout
    3. calculate_spacing      → one SpacingRules preset
    4. select_typography      → Typography for the layout/bullet count
    5. extract_color_scheme   → layout-specific slice of a ColorPalette

generate_slide_design runs those steps in that order and is the entry point
other components should call. validate_slide_content and
suggest_improvements are advisory: they return findings, never raise.
"""

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .models import (
    ColorPalette,
    InvalidInputError,
    LayoutType,
    SlideContent,
    SlideDesign,
    SlideDesignError,
    SpacingRules,
    Typography,
    VisualElement,
)
from .text_patterns import (
    count_bullet_words,
    count_words,
    extract_keyword,
    has_comparison_content,
    has_process_content,
    has_statistical_content,
)

logger = logging.getLogger(__name__)

LAYOUT_THRESHOLDS = MappingProxyType({
    'minimal_word_count': 20,
    'balanced_word_count': 50,
    'text_heavy_word_count': 100,
    'max_bullets_optimal': 6,
    'max_bullets_absolute': 8,
    'split_threshold': 7,
    'max_bullets_visual_dominant': 3,
    'max_bullet_words': 15,
    'max_title_words': 10,
})

SPACING_PRESETS = MappingProxyType({
    'generous': SpacingRules(
        name='generous',
        top_padding='80px',
        bottom_padding='80px',
        left_padding='100px',
        right_padding='100px',
        element_gap='40px',
        line_height=1.6,
    ),
    'standard': SpacingRules(
        name='standard',
        top_padding='60px',
        bottom_padding='60px',
        left_padding='80px',
        right_padding='80px',
        element_gap='30px',
        line_height=1.5,
    ),
    'compact': SpacingRules(
        name='compact',
        top_padding='40px',
        bottom_padding='40px',
        left_padding='60px',
        right_padding='60px',
        element_gap='20px',
        line_height=1.4,
    ),
})

COLOR_PALETTES = MappingProxyType({
    'professional': ColorPalette(
        primary='#2563eb', secondary='#64748b', accent='#0ea5e9',
        background='#ffffff', text='#1e293b', heading='#0f172a', muted='#94a3b8',
    ),
    'creative': ColorPalette(
        primary='#8b5cf6', secondary='#ec4899', accent='#f59e0b',
        background='#fef3c7', text='#44403c', heading='#292524', muted='#78716c',
    ),
    'minimal': ColorPalette(
        primary='#000000', secondary='#737373', accent='#a3a3a3',
        background='#ffffff', text='#262626', heading='#000000', muted='#a3a3a3',
    ),
    'academic': ColorPalette(
        primary='#1e40af', secondary='#475569', accent='#059669',
        background='#f8fafc', text='#334155', heading='#1e293b', muted='#64748b',
    ),
    'dark': ColorPalette(
        primary='#60a5fa', secondary='#94a3b8', accent='#34d399',
        background='#0f172a', text='#e2e8f0', heading='#f1f5f9', muted='#64748b',
    ),
})

DEFAULT_THEME = 'professional'

# Domain substrings → theme, first match wins
DOMAIN_THEMES = (
    (('business', 'corporate'), 'professional'),
    (('creative', 'design', 'art'), 'creative'),
    (('academic', 'research', 'science'), 'academic'),
    (('tech', 'developer'), 'minimal'),
)

BASE_TYPOGRAPHY = Typography(
    title_font='Inter, system-ui, sans-serif',
    body_font='Inter, system-ui, sans-serif',
    title_size='48px',
    title_weight=700,
    body_size='24px',
    body_weight=400,
    line_height=1.5,
)

_TITLE_LAYOUTS = (LayoutType.TITLE_CENTERED, LayoutType.FULL_IMAGE_OVERLAY)


class TooManyBulletsError(SlideDesignError):
    """Raised when a slide has too many bullets to lay out and must be split."""

    def __init__(self, slide_id: str, title: str, bullet_count: int):
        self.slide_id = slide_id
        self.title = title
        self.bullet_count = bullet_count
        super().__init__(
            f"Slide \"{title}\" has too many bullets ({bullet_count}). "
            f"Split into multiple slides."
        )


@dataclass(frozen=True)
class LayoutRule:
    """One (predicate, layout) pair of the decision table."""
    name: str
    matches: Callable[[SlideContent], bool]
    layout: LayoutType


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    warnings: tuple[str, ...] = ()


# Evaluated top to bottom; the first matching rule decides the layout.
# Structural overrides come before content-shape detectors.
LAYOUT_RULES = (
    LayoutRule('title slide', lambda s: s.type == 'title', LayoutType.TITLE_CENTERED),
    LayoutRule('section slide', lambda s: s.type == 'section', LayoutType.FULL_IMAGE_OVERLAY),
    LayoutRule('conclusion slide', lambda s: s.type == 'conclusion', LayoutType.TITLE_CENTERED),
    LayoutRule('statistical content', lambda s: has_statistical_content(s.content), LayoutType.GRID_LAYOUT),
    LayoutRule('process content', lambda s: has_process_content(s.content), LayoutType.TITLE_LEFT_CONTENT_RIGHT),
    LayoutRule('comparison content', lambda s: has_comparison_content(s.content), LayoutType.SPLIT_CONTENT),
)


def _minimal_band_layout(bullet_count: int) -> LayoutType:
    if bullet_count <= LAYOUT_THRESHOLDS['max_bullets_visual_dominant']:
        return LayoutType.VISUAL_DOMINANT
    return LayoutType.TITLE_LEFT_CONTENT_RIGHT


# (exclusive upper word bound, layout chooser), ascending.
# Anything at or above the last bound is text-heavy.
WORD_COUNT_BANDS = (
    (LAYOUT_THRESHOLDS['minimal_word_count'], _minimal_band_layout),
    (LAYOUT_THRESHOLDS['balanced_word_count'], lambda _: LayoutType.TITLE_LEFT_CONTENT_RIGHT),
    (LAYOUT_THRESHOLDS['text_heavy_word_count'], lambda _: LayoutType.TEXT_HEAVY),
)


def _check_position(slide_index: int, total_slides: int) -> None:
    if total_slides < 1 or not 0 <= slide_index < total_slides:
        raise InvalidInputError(
            f"Slide index {slide_index} is out of range for a deck of {total_slides} slides"
        )


def decide_layout(slide: SlideContent, slide_index: int, total_slides: int) -> LayoutType:
    """Choose the layout archetype for a slide.

    Rules run in a fixed order: structural overrides by slide type, then the
    statistical/process/comparison detectors, then the bullet-count guard,
    then word-count bands.

    Args:
        slide: Slide to lay out.
        slide_index: Zero-based position of the slide in the deck.
        total_slides: Number of slides in the deck.

    Returns:
        The chosen LayoutType.

    Raises:
        TooManyBulletsError: If no earlier rule matched and the slide has
            seven or more bullets.
        InvalidInputError: If the position is outside the deck.
    """
    _check_position(slide_index, total_slides)

    for rule in LAYOUT_RULES:
        if rule.matches(slide):
            logger.debug(f"Slide '{slide.id}': rule '{rule.name}' → {rule.layout.value}")
            return rule.layout

    bullet_count = len(slide.content)
    if bullet_count >= LAYOUT_THRESHOLDS['split_threshold']:
        raise TooManyBulletsError(slide.id, slide.title, bullet_count)

    word_count = count_bullet_words(slide.content)
    layout = LayoutType.TEXT_HEAVY
    for upper_bound, choose in WORD_COUNT_BANDS:
        if word_count < upper_bound:
            layout = choose(bullet_count)
            break

    logger.debug(
        f"Slide '{slide.id}': {word_count} words, {bullet_count} bullets → {layout.value}"
    )
    return layout


def decide_visual_elements(slide: SlideContent, layout: LayoutType) -> tuple[VisualElement, ...]:
    """Map a layout to its template of visual elements.

    Text-heavy slides get one inline icon per bullet; split-content slides
    get one image per side, using the slide title when bullets run out.
    """
    title = slide.title

    if layout == LayoutType.TITLE_CENTERED:
        return (VisualElement('image', 'background', 'full', title, 'hero'),)

    if layout == LayoutType.FULL_IMAGE_OVERLAY:
        return (VisualElement('image', 'background', 'full', title, 'section-divider'),)

    if layout == LayoutType.VISUAL_DOMINANT:
        return (VisualElement('image', 'foreground', 'large', title, 'featured'),)

    if layout == LayoutType.TITLE_LEFT_CONTENT_RIGHT:
        return (VisualElement('image', 'foreground', 'medium', title, 'supporting'),)

    if layout == LayoutType.TEXT_HEAVY:
        return tuple(
            VisualElement('icon', 'inline', 'small', extract_keyword(bullet), 'bullet-icon')
            for bullet in slide.content
        )

    if layout == LayoutType.GRID_LAYOUT:
        return (VisualElement('chart', 'foreground', 'large', title, 'data-visualization'),)

    if layout == LayoutType.SPLIT_CONTENT:
        sides = list(slide.content[:2]) + ['', '']
        left = sides[0] or title
        right = sides[1] or title
        return (
            VisualElement('image', 'foreground', 'medium', left, 'comparison-left'),
            VisualElement('image', 'foreground', 'medium', right, 'comparison-right'),
        )

    return ()


def calculate_spacing(slide: SlideContent, layout: LayoutType) -> SpacingRules:
    """Select the spacing preset for a slide's layout."""
    if layout in _TITLE_LAYOUTS or layout == LayoutType.VISUAL_DOMINANT:
        return SPACING_PRESETS['generous']

    word_count = count_bullet_words(slide.content)
    if layout == LayoutType.TEXT_HEAVY or word_count > LAYOUT_THRESHOLDS['balanced_word_count']:
        return SPACING_PRESETS['compact']

    return SPACING_PRESETS['standard']


def infer_theme_from_domain(domain: str) -> str:
    """Map a free-text domain/topic to a palette name."""
    lowered = domain.lower()
    for needles, theme in DOMAIN_THEMES:
        if any(needle in lowered for needle in needles):
            return theme
    return DEFAULT_THEME


def select_color_palette(
    domain: str,
    theme: str | None = None,
    brand_overrides: Mapping[str, Any] | None = None,
) -> ColorPalette:
    """Select a colour palette.

    Precedence:
    1. brand_overrides merged onto the palette named by theme (professional
       when theme is absent or unknown)
    2. the preset named by theme, verbatim
    3. a preset inferred from substrings of domain

    Args:
        domain: Free-text domain or topic of the deck.
        theme: Optional preset name.
        brand_overrides: Optional partial mapping of palette fields.

    Returns:
        The selected ColorPalette.

    Raises:
        InvalidInputError: If brand_overrides names an unknown field or a
            value is not a string.
    """
    if not isinstance(domain, str):
        raise InvalidInputError(f"domain must be a string, got {type(domain).__name__}")

    if brand_overrides:
        unknown = set(brand_overrides) - set(ColorPalette.field_names())
        if unknown:
            raise InvalidInputError(
                f"Unknown palette fields in brand overrides: {', '.join(sorted(unknown))}. "
                f"Valid fields: {', '.join(ColorPalette.field_names())}"
            )
        for key, value in brand_overrides.items():
            if not isinstance(value, str):
                raise InvalidInputError(f"Brand colour '{key}' must be a string")
        base = COLOR_PALETTES.get(theme or DEFAULT_THEME, COLOR_PALETTES[DEFAULT_THEME])
        return replace(base, **brand_overrides)

    if theme and theme in COLOR_PALETTES:
        return COLOR_PALETTES[theme]

    if theme:
        logger.warning(f"Unknown theme '{theme}', inferring from domain '{domain}'")

    return COLOR_PALETTES[infer_theme_from_domain(domain)]


def select_typography(layout: LayoutType, bullet_count: int) -> Typography:
    """Typography rules: larger titles on title slides, smaller text on dense ones."""
    if layout in _TITLE_LAYOUTS:
        return replace(BASE_TYPOGRAPHY, title_size='72px', title_weight=800)

    if layout == LayoutType.TEXT_HEAVY or bullet_count > 5:
        return replace(BASE_TYPOGRAPHY, title_size='42px', body_size='20px')

    return BASE_TYPOGRAPHY


def extract_color_scheme(palette: ColorPalette, layout: LayoutType) -> tuple[str, ...]:
    """Pick the ordered palette colours a layout actually uses."""
    if layout in _TITLE_LAYOUTS:
        return (palette.background, palette.heading, palette.primary)

    if layout == LayoutType.VISUAL_DOMINANT:
        return (palette.background, palette.primary, palette.accent)

    if layout == LayoutType.TEXT_HEAVY:
        return (palette.background, palette.text, palette.heading, palette.muted)

    return (palette.background, palette.primary, palette.text, palette.accent)


def generate_slide_design(
    slide: SlideContent,
    slide_index: int,
    total_slides: int,
    color_palette: ColorPalette,
) -> SlideDesign:
    """Produce the complete design for one slide.

    Raises:
        TooManyBulletsError: Propagated from decide_layout.
    """
    layout = decide_layout(slide, slide_index, total_slides)

    return SlideDesign(
        slide_id=slide.id,
        layout=layout,
        visual_elements=decide_visual_elements(slide, layout),
        spacing=calculate_spacing(slide, layout),
        color_scheme=extract_color_scheme(color_palette, layout),
        typography=select_typography(layout, len(slide.content)),
    )


# =============================================================================
# Advisory checks
# =============================================================================

def validate_slide_content(slide: SlideContent) -> ValidationResult:
    """Check a slide against authoring best practices.

    Flags more than six bullets, any bullet over fifteen words and a title
    over ten words.
    """
    warnings = []

    bullet_count = len(slide.content)
    if bullet_count > LAYOUT_THRESHOLDS['max_bullets_optimal']:
        warnings.append(
            f"Slide has {bullet_count} bullets. Consider splitting into multiple slides."
        )

    max_words = LAYOUT_THRESHOLDS['max_bullet_words']
    warnings.extend(
        f"Bullet {idx} is too long ({words} words). Keep bullets under {max_words} words."
        for idx, words in enumerate((count_words(b) for b in slide.content), start=1)
        if words > max_words
    )

    title_words = count_words(slide.title)
    if title_words > LAYOUT_THRESHOLDS['max_title_words']:
        warnings.append(
            f"Title is too long ({title_words} words). "
            f"Keep titles under {LAYOUT_THRESHOLDS['max_title_words']} words."
        )

    return ValidationResult(valid=not warnings, warnings=tuple(warnings))


def suggest_improvements(slide: SlideContent) -> tuple[str, ...]:
    """Suggest content changes for unbalanced slides."""
    word_count = count_bullet_words(slide.content)
    bullet_count = len(slide.content)

    suggestions = (
        (bullet_count == 1,
         'Consider adding 2-3 more points to balance the slide.'),
        (word_count > LAYOUT_THRESHOLDS['text_heavy_word_count'],
         'Content is dense. Consider visual elements or splitting into multiple slides.'),
        (word_count < 15 and bullet_count < 3,
         'Slide feels empty. Add more context or use a larger visual element.'),
    )
    return tuple(message for triggered, message in suggestions if triggered)
