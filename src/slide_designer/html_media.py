"""HTML inspection for rendered presentations.

The quality checker never renders markup; it only needs a handful of facts
about the HTML the rendering layer produced: which headings it
contains, how many inline style attributes it uses, which font sizes it
declares and whether keyboard events are wired up.
"""

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import List

HEADING_TAGS = frozenset({'h1', 'h2', 'h3', 'h4', 'h5', 'h6'})

FONT_SIZE_RE = re.compile(r'font-size:\s*(\d+)', re.IGNORECASE)
KEY_EVENT_RE = re.compile(r'keydown|keypress|keyup', re.IGNORECASE)


@dataclass
class MarkupSummary:
    """Facts collected from one HTML document."""
    headings: List[str] = field(default_factory=list)
    inline_styles: int = 0
    font_sizes: set[int] = field(default_factory=set)


class MarkupInspector(HTMLParser):
    """Collect headings and inline style attributes from HTML."""

    def __init__(self):
        super().__init__()
        self.summary = MarkupSummary()

    def handle_starttag(self, tag, attrs):
        attr_dict = dict(attrs)
        if tag in HEADING_TAGS:
            self.summary.headings.append(tag)
        if 'style' in attr_dict:
            self.summary.inline_styles += 1
            self.summary.font_sizes.update(extract_font_sizes(attr_dict['style'] or ''))

    # Self-closing tags (<br style=.../>) are reported through handle_startendtag,
    # whose default implementation forwards to handle_starttag.


def inspect_markup(html_content: str) -> MarkupSummary:
    """Parse HTML and summarize the facts the quality checks need.

    Args:
        html_content: HTML string to parse

    Returns:
        MarkupSummary for the document
    """
    parser = MarkupInspector()
    parser.feed(html_content)
    parser.close()
    return parser.summary


def extract_font_sizes(text: str) -> set[int]:
    """Collect the numeric values of every font-size declaration in text."""
    return {int(match.group(1)) for match in FONT_SIZE_RE.finditer(text)}


def has_keyboard_handlers(html_content: str) -> bool:
    """Check whether the markup wires up any key event."""
    return bool(KEY_EVENT_RE.search(html_content))
