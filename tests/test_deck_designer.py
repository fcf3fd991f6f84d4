"""
Tests for deck-level design orchestration
"""

import pytest

from slide_designer.config import Config
from slide_designer.deck_designer import DeckDesigner
from slide_designer.design_rules import COLOR_PALETTES
from slide_designer.models import LayoutType, SlideContent

from conftest import neutral_bullets


@pytest.fixture
def slides():
    return [
        SlideContent(id='cover', title='Welcome', type='title'),
        SlideContent(id='stats', title='Numbers', content=('Revenue up 12%', 'Costs down 3.5')),
        SlideContent(id='dense', title='Everything', content=neutral_bullets([2] * 8)),
        SlideContent(id='end', title='Thanks', type='conclusion'),
    ]


class TestDesignDeck:
    """Tests for designing a list of slides."""

    def test_failures_do_not_stop_the_deck(self, slides):
        result = DeckDesigner().design_deck(slides)

        assert [d.slide_id for d in result.designs] == ['cover', 'stats', 'end']
        assert [d.layout for d in result.designs] == [
            LayoutType.TITLE_CENTERED, LayoutType.GRID_LAYOUT, LayoutType.TITLE_CENTERED,
        ]
        assert not result.succeeded
        assert [(e.slide_id, e.bullet_count) for e in result.failures] == [('dense', 8)]

    def test_collects_analyses_and_warnings(self, slides):
        result = DeckDesigner().design_deck(slides)

        assert set(result.analyses) == {'cover', 'stats', 'dense', 'end'}
        assert result.analyses['stats'].has_lists
        assert list(result.warnings) == ['dense']
        assert 'Slide feels empty' in result.suggestions['cover'][0]

    def test_uses_explicit_palette(self, slides):
        palette = COLOR_PALETTES['dark']
        result = DeckDesigner(palette=palette).design_deck(slides[:2])
        assert result.palette == palette
        assert result.designs[0].color_scheme[0] == palette.background

    def test_palette_argument_wins(self, slides):
        result = DeckDesigner().design_deck(slides[:1], COLOR_PALETTES['minimal'])
        assert result.palette == COLOR_PALETTES['minimal']

    def test_empty_deck(self):
        result = DeckDesigner().design_deck([])
        assert result.succeeded
        assert result.designs == []


class TestResolvePalette:
    """Tests for palette precedence."""

    def test_configuration(self):
        designer = DeckDesigner(Config.from_dict({'design': {'theme': 'academic'}}))
        assert designer.resolve_palette() == COLOR_PALETTES['academic']

    def test_document_metadata_overrides_configuration(self):
        designer = DeckDesigner(Config.from_dict({'design': {'theme': 'academic'}}))
        assert designer.resolve_palette({'theme': 'creative'}) == COLOR_PALETTES['creative']

    def test_document_domain_keeps_configured_theme(self):
        designer = DeckDesigner(Config.from_dict({'design': {'theme': 'dark'}}))
        assert designer.resolve_palette({'domain': 'research'}) == COLOR_PALETTES['dark']

    def test_unrelated_metadata_is_ignored(self):
        designer = DeckDesigner(Config.from_dict({'design': {'domain': 'tech talks'}}))
        assert designer.resolve_palette({'title': 'Deck'}) == COLOR_PALETTES['minimal']


class TestDesignMarkdownFile:
    """Tests for designing a deck straight from markdown."""

    def test_markdown_deck(self, deck_file):
        result = DeckDesigner().design_markdown_file(deck_file)

        assert result.succeeded
        assert result.palette == COLOR_PALETTES['creative']
        assert [(d.slide_id, d.layout) for d in result.designs] == [
            ('cover', LayoutType.TITLE_CENTERED),
            ('plan', LayoutType.TITLE_LEFT_CONTENT_RIGHT),
            ('slide-3', LayoutType.VISUAL_DOMINANT),
        ]
