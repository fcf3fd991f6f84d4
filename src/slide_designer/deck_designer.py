"""Deck-level design orchestration.

Pipeline flow, per slide in deck order:
    1. ContentAnalyzer.analyze_slide      → ContentAnalysis
    2. validate_slide_content            → authoring warnings
    3. suggest_improvements              → balance suggestions
    4. generate_slide_design             → SlideDesign

A slide that violates content policy (too many bullets) is recorded as a
failure and the remaining slides are still designed; the engine never
invents a fallback layout for it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from .config import Config
from .content_analyzer import ContentAnalyzer
from .design_rules import (
    TooManyBulletsError,
    generate_slide_design,
    select_color_palette,
    suggest_improvements,
    validate_slide_content,
)
from .markdown_parser import parse_markdown_file
from .models import ColorPalette, ContentAnalysis, SlideContent, SlideDesign

logger = logging.getLogger(__name__)


@dataclass
class DeckDesignResult:
    """Result of designing a whole deck.

    Attributes:
        palette: Palette every slide design was drawn from.
        designs: Designs for the slides that could be laid out, in order.
        analyses: Content analysis per slide id.
        warnings: Authoring warnings per slide id (only slides with any).
        suggestions: Improvement suggestions per slide id (only slides with any).
        failures: Content-policy errors for slides that must be split.
    """
    palette: ColorPalette
    designs: list[SlideDesign] = field(default_factory=list)
    analyses: dict[str, ContentAnalysis] = field(default_factory=dict)
    warnings: dict[str, tuple[str, ...]] = field(default_factory=dict)
    suggestions: dict[str, tuple[str, ...]] = field(default_factory=dict)
    failures: list[TooManyBulletsError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


class DeckDesigner:
    """Designs every slide of a deck with one palette.

    The analyzer and palette are injected; nothing is shared between
    instances.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        analyzer: Optional[ContentAnalyzer] = None,
        palette: Optional[ColorPalette] = None,
    ):
        """Initialize the designer.

        Args:
            config: Configuration providing domain, theme and brand colours.
                Defaults to built-in defaults.
            analyzer: Content analyzer to use; a fresh one by default.
            palette: Explicit palette, overriding the configured one.
        """
        self.config = config or Config.from_dict({})
        self.analyzer = analyzer or ContentAnalyzer()
        self._palette = palette

    def resolve_palette(self, doc_metadata: Optional[dict] = None) -> ColorPalette:
        """Pick the palette: explicit > document frontmatter > configuration."""
        if self._palette is not None:
            return self._palette

        doc_metadata = doc_metadata or {}
        if any(key in doc_metadata for key in ('domain', 'theme', 'brand_colors')):
            return select_color_palette(
                doc_metadata.get('domain') or self.config.domain,
                doc_metadata.get('theme') or self.config.theme,
                doc_metadata.get('brand_colors') or self.config.get('design.brand_colors') or None,
            )
        return self.config.color_palette()

    def design_deck(
        self,
        slides: Sequence[SlideContent],
        palette: Optional[ColorPalette] = None,
    ) -> DeckDesignResult:
        """Analyze, validate and design every slide.

        Args:
            slides: Slides in deck order.
            palette: Palette for this deck; defaults to resolve_palette().

        Returns:
            DeckDesignResult with one design per slide that could be laid out.
        """
        palette = palette or self.resolve_palette()
        result = DeckDesignResult(palette=palette)
        total = len(slides)

        logger.info(f"Designing {total} slides...")

        for idx, slide in enumerate(slides):
            logger.debug(f"=== Slide {idx + 1}: {slide.title[:60]} ===")

            result.analyses[slide.id] = self.analyzer.analyze_slide(slide)

            validation = validate_slide_content(slide)
            if not validation.valid:
                result.warnings[slide.id] = validation.warnings
                for warning in validation.warnings:
                    logger.info(f"  Slide {idx + 1}: {warning}")

            suggestions = suggest_improvements(slide)
            if suggestions:
                result.suggestions[slide.id] = suggestions

            try:
                design = generate_slide_design(slide, idx, total, palette)
            except TooManyBulletsError as e:
                logger.warning(f"  Slide {idx + 1} ('{slide.id}') needs splitting: {e}")
                result.failures.append(e)
                continue

            logger.debug(f"  Layout: {design.layout.value}, spacing: {design.spacing.name}")
            result.designs.append(design)

        logger.info(
            f"Designed {len(result.designs)} of {total} slides"
            + (f" ({len(result.failures)} need splitting)" if result.failures else "")
        )
        return result

    def design_markdown_file(self, md_file: Path) -> DeckDesignResult:
        """Parse a markdown deck and design it.

        Document frontmatter (domain, theme, brand_colors) takes precedence
        over the configuration when choosing the palette.
        """
        doc_metadata, slides = parse_markdown_file(Path(md_file), self.config)
        return self.design_deck(slides, self.resolve_palette(doc_metadata))
