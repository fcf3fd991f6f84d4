"""Markdown parsing functionality for slide outlines.

This module turns a markdown deck with optional per-slide YAML frontmatter
into SlideContent records for the layout engine.

Expected format per slide:
    ---
    type: content
    id: market-overview
    ---

    # Market Overview
    - Bullet points...

The title comes from frontmatter or the first H1/H2 heading. Bullet items
(-, *, +) lose their marker; numbered items and any other non-heading line
become bullets as written.
"""

import re
import logging
from pathlib import Path
from typing import Any

import yaml

from .config import Config
from .models import InvalidInputError, SlideContent

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_TYPE = 'content'

# Frontmatter keys that only make sense on a slide, never on the document
SLIDE_KEYS = frozenset({'type', 'id'})

# Numbered markers are kept: "1. Collect data" still reads as a process step
_BULLET_MARKER_RE = re.compile(r'^[-*+]\s+')
_HEADING_RE = re.compile(r'^(#{1,6})\s+(.*)$')


def _parse_yaml_block(lines: list[str], what: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load('\n'.join(lines)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse {what} YAML frontmatter: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {what} frontmatter that is not a mapping")
        return {}
    return data


def _find_closing_delimiter(lines: list[str], delimiter: str) -> int:
    for i in range(1, len(lines)):
        if lines[i].strip() == delimiter:
            return i
    return -1


def parse_document_frontmatter(content: str, delimiter: str = '---') -> tuple[dict[str, Any], str]:
    """Extract and parse document-level YAML frontmatter from markdown content.

    Document frontmatter carries deck metadata (title, domain, theme,
    brand_colors) and must start on the first line.

    Args:
        content: Full markdown content.
        delimiter: Frontmatter delimiter (default '---').

    Returns:
        Tuple of (frontmatter_dict, remaining_content).
    """
    lines = content.split('\n')
    if not lines or lines[0].strip() != delimiter:
        return {}, content

    end_idx = _find_closing_delimiter(lines, delimiter)
    if end_idx == -1:
        return {}, content

    frontmatter = _parse_yaml_block(lines[1:end_idx], 'document')
    return frontmatter, '\n'.join(lines[end_idx + 1:])


def parse_slide_frontmatter(slide_content: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from the start of a slide.

    Args:
        slide_content: Content of a single slide (after document split).

    Returns:
        Tuple of (frontmatter_dict, content_without_frontmatter).
    """
    lines = slide_content.strip().split('\n')
    if lines[0].strip() != '---':
        return {}, slide_content

    end_idx = _find_closing_delimiter(lines, '---')
    if end_idx == -1:
        # No closing delimiter - not valid frontmatter
        return {}, slide_content

    frontmatter = _parse_yaml_block(lines[1:end_idx], 'slide')
    return frontmatter, '\n'.join(lines[end_idx + 1:]).strip()


def _split_into_slides(markdown_content: str, slide_separator: str = '---') -> list[str]:
    """Split markdown content into individual slide segments.

    `---` serves both as slide separator and as frontmatter delimiter. A
    separator directly followed by `key: value` lines opens frontmatter for
    the next slide; any other standalone separator ends the current slide.

    Args:
        markdown_content: Markdown content (document frontmatter already removed).
        slide_separator: Separator between slides (default '---').

    Returns:
        List of slide content strings.
    """
    lines = markdown_content.split('\n')
    slides: list[str] = []
    current: list[str] = []
    in_frontmatter = False

    def opens_frontmatter(line_idx: int) -> bool:
        for following in lines[line_idx + 1:]:
            if following.strip():
                stripped = following.strip()
                return ':' in stripped and not stripped.startswith('#')
        return False

    def flush():
        text = '\n'.join(current).strip()
        if text:
            slides.append(text)

    for idx, line in enumerate(lines):
        if line.strip() != slide_separator:
            current.append(line)
            continue

        if in_frontmatter:
            current.append(line)
            in_frontmatter = False
            continue

        if any(existing.strip() for existing in current):
            flush()
        current = []

        if opens_frontmatter(idx):
            in_frontmatter = True
            current = [line]

    flush()
    return slides


def _parse_slide_body(content: str) -> tuple[str | None, list[str]]:
    """Parse slide body into title and bullets.

    Args:
        content: Markdown content (frontmatter already removed).

    Returns:
        Tuple of (title, bullets).
    """
    title = None
    bullets: list[str] = []

    for line in content.split('\n'):
        stripped = line.strip()
        if not stripped or stripped.startswith('<!--'):
            continue

        heading = _HEADING_RE.match(stripped)
        if heading:
            text = heading.group(2).strip()
            # H1 or H2 can be the title; later headings become content
            if title is None and len(heading.group(1)) <= 2:
                title = text
            elif text:
                bullets.append(text)
            continue

        bullet = _BULLET_MARKER_RE.sub('', stripped)
        if bullet:
            bullets.append(bullet)

    return title, bullets


def parse_slides(markdown_content: str, *, slide_separator: str = '---') -> list[SlideContent]:
    """Parse markdown content into a list of SlideContent objects.

    Args:
        markdown_content: Markdown content (document frontmatter removed).
        slide_separator: Separator between slides (default '---').

    Returns:
        List of SlideContent objects in deck order.

    Raises:
        InvalidInputError: If a slide has no title in frontmatter or headings,
            or a frontmatter field has the wrong type.
    """
    slides: list[SlideContent] = []

    for raw_slide in _split_into_slides(markdown_content, slide_separator):
        number = len(slides) + 1
        frontmatter, body = parse_slide_frontmatter(raw_slide)
        heading_title, bullets = _parse_slide_body(body)

        title = frontmatter.get('title') or heading_title
        if not title:
            raise InvalidInputError(
                f"Slide {number} has no title (add a '# Heading' or 'title:' frontmatter)"
            )

        slide = SlideContent(
            id=str(frontmatter.get('id') or f'slide-{number}'),
            title=str(title),
            type=frontmatter.get('type') or DEFAULT_SLIDE_TYPE,
            content=tuple(bullets),
        )
        logger.debug(
            f"Parsed slide {number}: id={slide.id}, type={slide.type}, "
            f"bullets={len(slide.content)}"
        )
        slides.append(slide)

    logger.info(f"Parsed {len(slides)} slides from markdown")
    return slides


def parse_markdown_file(
    md_file: Path,
    config: Config | None = None,
) -> tuple[dict[str, Any], list[SlideContent]]:
    """Parse a markdown file into document metadata and slides.

    Args:
        md_file: Path to the markdown file.
        config: Optional Config object for the slide separator.

    Returns:
        Tuple of (document_frontmatter, list_of_SlideContent).

    Raises:
        FileNotFoundError: If markdown file doesn't exist.
        InvalidInputError: If a slide is malformed.
    """
    md_file = Path(md_file)
    if not md_file.exists():
        raise FileNotFoundError(f"Markdown file not found: {md_file}")

    with open(md_file, 'r', encoding='utf-8') as f:
        content = f.read()

    logger.info(f"Parsing markdown file: {md_file} ({len(content)} chars)")

    slide_separator = '---'
    if config:
        slide_separator = config.get('markdown.slide_separator', '---')

    doc_frontmatter, remaining = parse_document_frontmatter(content)
    if SLIDE_KEYS & doc_frontmatter.keys():
        # The opening block belongs to the first slide
        doc_frontmatter, remaining = {}, content
    logger.info(f"Document frontmatter keys: {list(doc_frontmatter.keys())}")

    return doc_frontmatter, parse_slides(remaining, slide_separator=slide_separator)
