"""Slide design decision engine package."""

from .models import (
    SlideDesignError,
    InvalidInputError,
    LayoutType,
    SlideContent,
    VisualElement,
    SpacingRules,
    ColorPalette,
    Typography,
    SlideDesign,
    AssetSuggestion,
    ContentAnalysis,
    SlideImage,
    RenderedSlide,
    Presentation,
    CheckResult,
    CategoryResult,
    OverallResult,
    QualityReport,
)
from .content_analyzer import ContentAnalyzer
from .design_rules import (
    LAYOUT_THRESHOLDS,
    SPACING_PRESETS,
    COLOR_PALETTES,
    LAYOUT_RULES,
    TooManyBulletsError,
    ValidationResult,
    decide_layout,
    decide_visual_elements,
    calculate_spacing,
    select_color_palette,
    select_typography,
    extract_color_scheme,
    generate_slide_design,
    validate_slide_content,
    suggest_improvements,
)
from .quality_checker import (
    CheckFn,
    DEFAULT_CHECKS,
    QualityChecker,
    contrast_ratio,
    format_report,
)
from .config import Config
from .markdown_parser import parse_slides, parse_markdown_file
from .pptx_loader import load_presentation
from .deck_designer import DeckDesigner, DeckDesignResult

__all__ = [
    # Errors
    "SlideDesignError",
    "InvalidInputError",
    "TooManyBulletsError",
    # Data model
    "LayoutType",
    "SlideContent",
    "VisualElement",
    "SpacingRules",
    "ColorPalette",
    "Typography",
    "SlideDesign",
    "AssetSuggestion",
    "ContentAnalysis",
    "SlideImage",
    "RenderedSlide",
    "Presentation",
    "CheckResult",
    "CategoryResult",
    "OverallResult",
    "QualityReport",
    # Content analysis
    "ContentAnalyzer",
    # Layout decisions
    "LAYOUT_THRESHOLDS",
    "SPACING_PRESETS",
    "COLOR_PALETTES",
    "LAYOUT_RULES",
    "ValidationResult",
    "decide_layout",
    "decide_visual_elements",
    "calculate_spacing",
    "select_color_palette",
    "select_typography",
    "extract_color_scheme",
    "generate_slide_design",
    "validate_slide_content",
    "suggest_improvements",
    # Quality checking
    "CheckFn",
    "DEFAULT_CHECKS",
    "QualityChecker",
    "contrast_ratio",
    "format_report",
    # Deck input and orchestration
    "Config",
    "parse_slides",
    "parse_markdown_file",
    "load_presentation",
    "DeckDesigner",
    "DeckDesignResult",
]
