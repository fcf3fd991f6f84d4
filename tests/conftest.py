"""
Pytest configuration and shared fixtures
"""

from pathlib import Path

import pytest

from slide_designer.models import Presentation, RenderedSlide, SlideContent, SlideImage

# Words that trigger none of the statistical, process or comparison detectors
NEUTRAL_WORDS = (
    'alpha', 'bravo', 'delta', 'echo', 'golf', 'hotel', 'india', 'juliet',
    'kilo', 'lima', 'mike', 'oscar', 'papa', 'quebec', 'romeo', 'sierra',
)

ACCESSIBLE_HTML = """
<html>
  <body>
    <section><h1>Quarterly Review</h1><p>Summary</p></section>
    <section><h2>Highlights</h2><img src="chart.png" alt="Revenue chart"></section>
    <script>document.addEventListener('keydown', onKey);</script>
  </body>
</html>
"""


def neutral_bullets(word_counts):
    """Build bullets with the given number of neutral words each."""
    bullets = []
    for count in word_counts:
        words = [NEUTRAL_WORDS[i % len(NEUTRAL_WORDS)] for i in range(count)]
        bullets.append(' '.join(words))
    return tuple(bullets)


@pytest.fixture
def make_slide():
    """Factory for SlideContent with sensible defaults."""
    def _make(content=(), slide_type='content', title='Overview', slide_id='s1'):
        return SlideContent(id=slide_id, title=title, type=slide_type, content=tuple(content))
    return _make


@pytest.fixture
def clean_presentation() -> Presentation:
    """A small presentation that passes every measured check."""
    return Presentation(
        title='Quarterly Review',
        slides=(
            RenderedSlide(
                number=1,
                title='Quarterly Review',
                content='Results for the third quarter.',
                layout='title-centered',
                background_color='#ffffff',
                text_color='#1e293b',
            ),
            RenderedSlide(
                number=2,
                title='Highlights',
                content='- Revenue is up.\n- Costs are flat.\n- Hiring is on plan.',
                layout='title-left-content-right',
                background_color='#ffffff',
                text_color='#1e293b',
                images=(SlideImage(url='chart.png', alt='Revenue chart'),),
            ),
        ),
        html=ACCESSIBLE_HTML,
        css='section { padding: 60px; }',
    )


@pytest.fixture
def deck_markdown() -> str:
    return """---
title: Product Launch
domain: creative agency
---

---
type: title
id: cover
---

# Product Launch

---
type: content
id: plan
---

# Launch Plan
- Step 1 Brief the agency
- Step 2 Shoot the campaign
- Step 3 Publish everywhere

---

# Open Questions
- Which channels matter most
- Who owns the budget
"""


@pytest.fixture
def deck_file(tmp_path: Path, deck_markdown: str) -> Path:
    path = tmp_path / 'deck.md'
    path.write_text(deck_markdown, encoding='utf-8')
    return path
