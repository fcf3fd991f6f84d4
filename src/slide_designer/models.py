"""Data structures shared by the analyzer, layout engine and quality checker.

All records are frozen dataclasses; sequences are stored as tuples so that a
value handed to one component can never be changed behind another's back.
Constructors named ``from_dict`` accept plain mappings (parsed YAML/JSON) and
fail fast with ``InvalidInputError`` on malformed input.
"""

import copy
from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class SlideDesignError(Exception):
    """Base class for errors raised by slide_designer."""
    pass


class InvalidInputError(SlideDesignError, ValueError):
    """Raised when an input record is missing fields or has the wrong shape."""
    pass


def clamp_score(value: float) -> float:
    """Clamp a score into the closed range [0, 100]."""
    return max(0.0, min(100.0, float(value)))


def _require(data: Mapping[str, Any], key: str, kind: str) -> Any:
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"{kind} must be a mapping, got {type(data).__name__}")
    if key not in data or data[key] is None:
        raise InvalidInputError(f"{kind} is missing required field '{key}'")
    return data[key]


def _require_str(data: Mapping[str, Any], key: str, kind: str) -> str:
    value = _require(data, key, kind)
    if not isinstance(value, str):
        raise InvalidInputError(
            f"{kind} field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


class LayoutType(str, Enum):
    """Closed set of layout archetypes a slide can be assigned."""
    TITLE_CENTERED = "title-centered"
    FULL_IMAGE_OVERLAY = "full-image-overlay"
    VISUAL_DOMINANT = "visual-dominant"
    TITLE_LEFT_CONTENT_RIGHT = "title-left-content-right"
    TEXT_HEAVY = "text-heavy"
    GRID_LAYOUT = "grid-layout"
    SPLIT_CONTENT = "split-content"


# =============================================================================
# Layout engine input / output
# =============================================================================

@dataclass(frozen=True)
class SlideContent:
    """A slide as produced by outline generation.

    Attributes:
        id: Stable identifier of the slide.
        title: Slide title.
        type: Structural role (title, section, content, conclusion, ...).
        content: Ordered bullet strings.
    """
    id: str
    title: str
    type: str = "content"
    content: tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.title, str):
            raise InvalidInputError(f"Slide '{self.id}' title must be a string")
        if not isinstance(self.type, str) or not self.type:
            raise InvalidInputError(f"Slide '{self.id}' type must be a non-empty string")
        bullets = tuple(self.content)
        for idx, bullet in enumerate(bullets):
            if not isinstance(bullet, str):
                raise InvalidInputError(
                    f"Slide '{self.id}' bullet {idx + 1} must be a string, "
                    f"got {type(bullet).__name__}"
                )
        object.__setattr__(self, "content", bullets)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SlideContent":
        content = _require(data, "content", "Slide")
        if isinstance(content, str) or not isinstance(content, (list, tuple)):
            raise InvalidInputError("Slide field 'content' must be a list of strings")
        return cls(
            id=str(_require(data, "id", "Slide")),
            title=_require_str(data, "title", "Slide"),
            type=_require_str(data, "type", "Slide"),
            content=tuple(content),
        )


@dataclass(frozen=True)
class VisualElement:
    """An image, icon or chart to be placed on a slide."""
    type: str  # image, icon, chart
    placement: str  # background, foreground, inline
    size: str  # full, large, medium, small
    query: str
    style: str


@dataclass(frozen=True)
class SpacingRules:
    """One named spacing preset."""
    name: str
    top_padding: str
    bottom_padding: str
    left_padding: str
    right_padding: str
    element_gap: str
    line_height: float


@dataclass(frozen=True)
class ColorPalette:
    """The seven colour roles every theme defines."""
    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    heading: str
    muted: str

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(cls.__dataclass_fields__)


@dataclass(frozen=True)
class Typography:
    title_font: str
    body_font: str
    title_size: str
    title_weight: int
    body_size: str
    body_weight: int
    line_height: float


@dataclass(frozen=True)
class SlideDesign:
    """Complete design decision for one slide."""
    slide_id: str
    layout: LayoutType
    visual_elements: tuple[VisualElement, ...]
    spacing: SpacingRules
    color_scheme: tuple[str, ...]
    typography: Typography

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data for YAML/JSON serialization."""
        return {
            "slide_id": self.slide_id,
            "layout": self.layout.value,
            "visual_elements": [asdict(element) for element in self.visual_elements],
            "spacing": asdict(self.spacing),
            "color_scheme": list(self.color_scheme),
            "typography": asdict(self.typography),
        }


# =============================================================================
# Content analysis
# =============================================================================

@dataclass(frozen=True)
class AssetSuggestion:
    type: str  # image, icon, chart
    description: str
    relevance: float
    search_query: str


@dataclass(frozen=True)
class ContentAnalysis:
    """Read-only snapshot of the signals extracted from a block of text."""
    word_count: int
    sentence_count: int
    has_lists: bool
    has_quotes: bool
    has_code: bool
    has_numbers: bool
    complexity: str  # simple, medium, complex
    tone: str  # formal, casual, technical
    key_points: tuple[str, ...] = ()
    suggested_assets: tuple[AssetSuggestion, ...] = ()


# =============================================================================
# Quality checker input / output
# =============================================================================

@dataclass(frozen=True)
class SlideImage:
    url: str
    alt: str | None = None


@dataclass(frozen=True)
class RenderedSlide:
    """A slide after rendering, as inspected by the quality checker."""
    number: int
    title: str
    content: str
    layout: str
    background_color: str | None = None
    text_color: str | None = None
    images: tuple[SlideImage, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderedSlide":
        number = _require(data, "number", "Rendered slide")
        if not isinstance(number, int) or isinstance(number, bool):
            raise InvalidInputError("Rendered slide field 'number' must be an integer")

        images = []
        for raw in data.get("images") or []:
            if isinstance(raw, str):
                images.append(SlideImage(url=raw))
            else:
                images.append(SlideImage(
                    url=_require_str(raw, "url", "Slide image"),
                    alt=raw.get("alt"),
                ))

        return cls(
            number=number,
            title=_require_str(data, "title", "Rendered slide"),
            content=_require_str(data, "content", "Rendered slide"),
            layout=_require_str(data, "layout", "Rendered slide"),
            background_color=data.get("background_color", data.get("backgroundColor")),
            text_color=data.get("text_color", data.get("textColor")),
            images=tuple(images),
        )


@dataclass(frozen=True)
class Presentation:
    """An assembled presentation: ordered slides plus the emitted markup."""
    title: str
    slides: tuple[RenderedSlide, ...] = ()
    html: str = ""
    css: str = ""

    def __post_init__(self):
        object.__setattr__(self, "slides", tuple(self.slides))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Presentation":
        slides = _require(data, "slides", "Presentation")
        if not isinstance(slides, (list, tuple)):
            raise InvalidInputError("Presentation field 'slides' must be a list")
        return cls(
            title=_require_str(data, "title", "Presentation"),
            slides=tuple(RenderedSlide.from_dict(s) for s in slides),
            html=data.get("html") or "",
            css=data.get("css") or "",
        )


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one named quality check. Scores are clamped to [0, 100]."""
    passed: bool
    score: float
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "score", clamp_score(self.score))
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "score": self.score,
            "message": self.message,
            "details": copy.deepcopy(dict(self.details)),
        }


@dataclass(frozen=True)
class CategoryResult:
    score: float
    checks: Mapping[str, CheckResult]

    def __post_init__(self):
        object.__setattr__(self, "checks", MappingProxyType(dict(self.checks)))


@dataclass(frozen=True)
class OverallResult:
    score: float
    grade: str
    passed: bool


@dataclass(frozen=True)
class QualityReport:
    overall: OverallResult
    design: CategoryResult
    content: CategoryResult
    accessibility: CategoryResult
    performance: CategoryResult
    recommendations: tuple[str, ...] = ()

    def categories(self) -> dict[str, CategoryResult]:
        """Category results keyed by name, in report order."""
        return {
            "design": self.design,
            "content": self.content,
            "accessibility": self.accessibility,
            "performance": self.performance,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data for YAML/JSON serialization."""
        data: dict[str, Any] = {"overall": asdict(self.overall)}
        for name, category in self.categories().items():
            data[name] = {
                "score": category.score,
                "checks": {key: check.to_dict() for key, check in category.checks.items()},
            }
        data["recommendations"] = list(self.recommendations)
        return data
