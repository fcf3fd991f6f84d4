"""Load a rendered PowerPoint deck for quality checking.

Builds the Presentation record the quality checker inspects from a .pptx
file: slide titles, body text, layout names, picture alt text and explicit
background/text colours. A .pptx carries no HTML or CSS, so those fields
are empty and the markup-based checks score accordingly.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pptx
from pptx.enum.dml import MSO_COLOR_TYPE, MSO_FILL
from pptx.shapes.picture import Picture

from .models import Presentation, RenderedSlide, SlideImage

logger = logging.getLogger(__name__)


def _rgb_hex(color_format) -> Optional[str]:
    """Return '#rrggbb' for an explicit RGB colour, None for theme/unset colours."""
    if color_format.type != MSO_COLOR_TYPE.RGB:
        return None
    return f"#{str(color_format.rgb).lower()}"


def _background_color(slide) -> Optional[str]:
    # Only slides with their own solid background are inspected
    if not slide.follow_master_background:
        fill = slide.background.fill
        if fill.type == MSO_FILL.SOLID:
            return _rgb_hex(fill.fore_color)
    return None


def _picture_alt_text(shape) -> Optional[str]:
    c_nv_pr = shape._element.nvPicPr.cNvPr
    return c_nv_pr.get('descr')


def _read_slide(number: int, slide) -> RenderedSlide:
    """Convert one python-pptx slide into a RenderedSlide.

    Paragraphs in body placeholders become '- ' bullet lines; text in other
    shapes is kept as plain lines.
    """
    title_shape = slide.shapes.title
    title = title_shape.text_frame.text.strip() if title_shape is not None else ''

    lines: list[str] = []
    images: list[SlideImage] = []
    text_color: Optional[str] = None

    for shape in slide.shapes:
        if isinstance(shape, Picture):
            images.append(SlideImage(url=shape.name, alt=_picture_alt_text(shape)))
            continue

        if not shape.has_text_frame:
            continue

        is_title = title_shape is not None and shape.shape_id == title_shape.shape_id
        bulleted = shape.is_placeholder and not is_title

        for paragraph in shape.text_frame.paragraphs:
            for run in paragraph.runs:
                # font.color would switch the run to a solid fill; read fill instead
                if text_color is None and run.font.fill.type == MSO_FILL.SOLID:
                    text_color = _rgb_hex(run.font.fill.fore_color)
            if is_title:
                continue
            text = paragraph.text.strip()
            if text:
                lines.append(f"- {text}" if bulleted else text)

    return RenderedSlide(
        number=number,
        title=title,
        content='\n'.join(lines),
        layout=slide.slide_layout.name,
        background_color=_background_color(slide),
        text_color=text_color,
        images=tuple(images),
    )


def load_presentation(pptx_path: Union[str, Path], title: Optional[str] = None) -> Presentation:
    """Load a .pptx file as a quality-checker Presentation.

    Args:
        pptx_path: Path to the PowerPoint file.
        title: Presentation title; defaults to the core properties title,
            then to the file stem.

    Returns:
        Presentation with one RenderedSlide per slide and empty html/css.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(pptx_path)
    if not path.exists():
        raise FileNotFoundError(f"Presentation file not found: {pptx_path}")

    prs = pptx.Presentation(str(path))
    logger.info(f"Loading {len(prs.slides)} slides from {path}")

    slides = tuple(_read_slide(number, slide) for number, slide in enumerate(prs.slides, start=1))
    for slide in slides:
        logger.debug(
            f"  Slide {slide.number}: layout='{slide.layout}', images={len(slide.images)}"
        )

    return Presentation(
        title=title or prs.core_properties.title or path.stem,
        slides=slides,
    )
