"""
Tests for presentation quality scoring
"""

import asyncio
from dataclasses import replace

import pytest
import yaml

from slide_designer.config import Config
from slide_designer.models import (
    CheckResult,
    InvalidInputError,
    Presentation,
    RenderedSlide,
    SlideImage,
)
from slide_designer.quality_checker import (
    DEFAULT_CHECKS,
    QualityChecker,
    calculate_overall_score,
    check_alt_text,
    check_bullet_density,
    check_code_efficiency,
    check_color_contrast,
    check_file_size,
    check_layout_consistency,
    check_readability,
    check_semantic_structure,
    check_typography,
    check_word_count,
    contrast_ratio,
    format_report,
    grade_for_score,
    parse_hex_color,
)


def _slide(number=1, content='Short text.', layout='text-heavy', **kwargs):
    return RenderedSlide(number=number, title=f'Slide {number}', content=content, layout=layout, **kwargs)


def _fixed(score):
    def check(presentation):
        return CheckResult(passed=score >= 70, score=score, message=f'fixed {score}')
    return check


class TestColorMath:
    """Tests for hex parsing and WCAG contrast."""

    def test_parse_long_and_short_forms(self):
        assert parse_hex_color('#1e293b') == (0x1e, 0x29, 0x3b)
        assert parse_hex_color('#fff') == (255, 255, 255)

    def test_parse_rejects_garbage(self):
        with pytest.raises(InvalidInputError):
            parse_hex_color('blue')

    def test_black_on_white_is_maximal(self):
        assert contrast_ratio('#ffffff', '#000000') == pytest.approx(21.0)

    def test_ratio_is_symmetric(self):
        assert contrast_ratio('#2563eb', '#ffffff') == pytest.approx(contrast_ratio('#ffffff', '#2563eb'))

    def test_same_colour_is_one(self):
        assert contrast_ratio('#777777', '#777777') == pytest.approx(1.0)


class TestDesignChecks:
    """Tests for the design family."""

    def test_contrast_passes(self):
        presentation = Presentation('Deck', (_slide(background_color='#ffffff', text_color='#000000'),))
        result = check_color_contrast(presentation)
        assert result.passed
        assert result.score == 100

    def test_contrast_fails_for_pale_text(self):
        presentation = Presentation('Deck', (_slide(background_color='#ffffff', text_color='#f0f0f0'),))
        result = check_color_contrast(presentation)
        assert not result.passed
        assert 0 < result.score < 100
        assert result.details['slides_checked'] == 1

    def test_contrast_without_colours_passes(self):
        result = check_color_contrast(Presentation('Deck', (_slide(),)))
        assert result.passed
        assert result.details['lowest_contrast'] == 21

    def test_typography_counts_distinct_sizes(self):
        html = ''.join(f'<p style="font-size: {size}px">x</p>' for size in (10, 12, 14, 16, 18, 20, 22))
        result = check_typography(Presentation('Deck', (_slide(),), html=html))
        assert not result.passed
        assert result.score == 80
        assert result.details['font_size_variety'] == 7

    def test_layout_consistency(self):
        slides = tuple(_slide(number=i, layout=f'layout-{i}') for i in range(1, 8))
        result = check_layout_consistency(Presentation('Deck', slides))
        assert not result.passed
        assert result.score == 80


class TestContentChecks:
    """Tests for the content family."""

    def test_readability_penalises_long_sentences(self):
        content = ' '.join(['word'] * 30) + '.'
        result = check_readability(Presentation('Deck', (_slide(content=content),)))
        assert not result.passed
        assert result.score == pytest.approx(50)

    def test_word_count(self):
        content = ' '.join(['word'] * 60)
        result = check_word_count(Presentation('Deck', (_slide(content=content), _slide(2))))
        assert result.score == 80
        assert result.details['max_words'] == 60

    def test_empty_deck(self):
        empty = Presentation('Empty')
        assert check_word_count(empty).details['max_words'] == 0
        assert check_readability(empty).passed

    def test_bullet_density(self):
        content = '\n'.join(f'- point {i}' for i in range(9))
        result = check_bullet_density(Presentation('Deck', (_slide(content=content),)))
        assert not result.passed
        assert result.score == 80


class TestAccessibilityChecks:
    """Tests for the accessibility family."""

    def test_alt_text_ratio(self):
        slide = _slide(images=(
            SlideImage('a.png', 'Chart'),
            SlideImage('b.png'),
            SlideImage('c.png', '   '),
            SlideImage('d.png', 'Team'),
        ))
        result = check_alt_text(Presentation('Deck', (slide,)))
        assert not result.passed
        assert result.score == 50
        assert result.details == {'total_images': 4, 'missing_alt': 2}

    def test_no_images_scores_full(self):
        assert check_alt_text(Presentation('Deck', (_slide(),))).score == 100

    def test_semantic_structure(self):
        assert check_semantic_structure(Presentation('Deck', html='<h3>Agenda</h3>')).passed
        assert check_semantic_structure(Presentation('Deck', html='<div>Agenda</div>')).score == 50


class TestPerformanceChecks:
    """Tests for the performance family."""

    def test_large_file(self):
        html = 'x' * (600 * 1024)
        result = check_file_size(Presentation('Deck', html=html))
        assert not result.passed
        assert result.score == pytest.approx(90)

    def test_inline_styles(self):
        html = '<p style="margin: 0">x</p>' * 60
        result = check_code_efficiency(Presentation('Deck', html=html))
        assert not result.passed
        assert result.score == 90
        assert result.details['inline_styles'] == 60


class TestAggregation:
    """Tests for category weighting and grading."""

    def test_uniform_scores_give_the_same_overall(self):
        assert calculate_overall_score(
            {'design': 80, 'content': 80, 'accessibility': 80, 'performance': 80}
        ) == 80

    @pytest.mark.parametrize('score,grade', [
        (100, 'A'), (90, 'A'), (89.999, 'B'), (80, 'B'), (70, 'C'), (60, 'D'), (59.9, 'F'), (0, 'F'),
    ])
    def test_grades(self, score, grade):
        assert grade_for_score(score) == grade

    def test_check_scores_are_clamped(self):
        assert CheckResult(passed=False, score=-40, message='x').score == 0
        assert CheckResult(passed=True, score=140, message='x').score == 100


class TestQualityChecker:
    """Tests for QualityChecker orchestration."""

    @pytest.mark.asyncio
    async def test_clean_presentation(self, clean_presentation):
        report = await QualityChecker().check_presentation(clean_presentation)

        assert report.design.score == pytest.approx(99)
        assert report.content.score == pytest.approx(97)
        assert report.accessibility.score == pytest.approx(98)
        assert report.performance.score == pytest.approx(100)
        assert report.overall.score == pytest.approx(98.3)
        assert report.overall.grade == 'A'
        assert report.overall.passed
        assert report.recommendations == ()

    @pytest.mark.asyncio
    async def test_every_check_reported(self, clean_presentation):
        report = await QualityChecker().check_presentation(clean_presentation)
        for name, category in report.categories().items():
            assert set(category.checks) == set(DEFAULT_CHECKS[name])

    @pytest.mark.asyncio
    async def test_missing_markup_recommends_keyboard_navigation(self, clean_presentation):
        bare = replace(clean_presentation, html='')
        report = await QualityChecker().check_presentation(bare)

        assert report.accessibility.checks['keyboard_nav'].score == 0
        assert report.accessibility.checks['semantic_html'].score == 50
        assert report.accessibility.score == pytest.approx(68)
        assert report.overall.score == pytest.approx(90.8)
        assert report.recommendations == ('Implement keyboard navigation',)

    @pytest.mark.asyncio
    async def test_low_contrast_recommendations_in_order(self, clean_presentation):
        slides = tuple(
            replace(slide, text_color='#f0f0f0', images=(SlideImage('x.png'),))
            for slide in clean_presentation.slides
        )
        report = await QualityChecker().check_presentation(replace(clean_presentation, slides=slides))
        assert report.recommendations == (
            'Improve color contrast for better readability',
            'Add descriptive alt text to all images',
        )

    @pytest.mark.asyncio
    async def test_min_score_decides_pass(self):
        checks = {category: {'fixed': _fixed(80)} for category in DEFAULT_CHECKS}
        report = await QualityChecker(min_score=85, checks=checks).check_presentation(Presentation('Deck'))
        assert report.overall.score == 80
        assert report.overall.grade == 'B'
        assert not report.overall.passed

    @pytest.mark.asyncio
    async def test_registered_async_check_replaces_stub(self, clean_presentation):
        async def strict_grammar(presentation):
            await asyncio.sleep(0)
            return CheckResult(passed=False, score=45, message='Grammar issues found')

        checker = QualityChecker()
        checker.register_check('content', 'grammar', strict_grammar)
        report = await checker.check_presentation(clean_presentation)

        assert report.content.checks['grammar'].score == 45
        assert report.content.score == pytest.approx((100 + 100 + 100 + 90 + 45) / 5)

    @pytest.mark.asyncio
    async def test_registration_is_per_instance(self, clean_presentation):
        QualityChecker().register_check('content', 'grammar', _fixed(10))
        report = await QualityChecker().check_presentation(clean_presentation)
        assert report.content.checks['grammar'].score == 95

    @pytest.mark.asyncio
    async def test_check_must_return_check_result(self, clean_presentation):
        checker = QualityChecker()
        checker.register_check('design', 'broken', lambda presentation: 42)
        with pytest.raises(TypeError):
            await checker.check_presentation(clean_presentation)

    @pytest.mark.asyncio
    async def test_rejects_non_presentation(self):
        with pytest.raises(InvalidInputError):
            await QualityChecker().check_presentation({'title': 'Deck'})

    @pytest.mark.asyncio
    async def test_repeat_runs_are_identical(self, clean_presentation):
        checker = QualityChecker()
        first = await checker.check_presentation(clean_presentation)
        second = await checker.check_presentation(clean_presentation)
        assert first == second

    @pytest.mark.parametrize('min_score', [-1, 101, 'high', True])
    def test_invalid_min_score(self, min_score):
        with pytest.raises(ValueError):
            QualityChecker(min_score=min_score)

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            QualityChecker().register_check('style', 'fonts', _fixed(100))


class TestDefaultChecks:
    """Tests for the shared default check registry."""

    def test_outer_registry_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CHECKS['style'] = {}
        assert 'style' not in DEFAULT_CHECKS

    @pytest.mark.parametrize('category', ['design', 'content', 'accessibility', 'performance'])
    def test_inner_registries_are_read_only(self, category):
        with pytest.raises(TypeError):
            DEFAULT_CHECKS[category]['fixed'] = _fixed(100)
        assert 'fixed' not in DEFAULT_CHECKS[category]

    def test_from_config_uses_min_score(self):
        config = Config.from_dict({'quality': {'min_score': 85}})
        assert QualityChecker.from_config(config).min_score == 85


class TestReportImmutability:
    """Tests for the read-only report structures."""

    def test_details_are_read_only(self):
        details = {'max_words': 12}
        result = CheckResult(passed=True, score=90, message='ok', details=details)
        details['max_words'] = 99
        assert result.details['max_words'] == 12
        with pytest.raises(TypeError):
            result.details['max_words'] = 0

    @pytest.mark.asyncio
    async def test_category_checks_are_read_only(self, clean_presentation):
        report = await QualityChecker().check_presentation(clean_presentation)
        with pytest.raises(TypeError):
            report.content.checks['grammar'] = CheckResult(passed=False, score=0, message='x')
        assert report.content.checks['grammar'].score == 95

    @pytest.mark.asyncio
    async def test_to_dict_gives_plain_data(self, clean_presentation):
        report = await QualityChecker().check_presentation(clean_presentation)
        data = report.to_dict()

        check = data['design']['checks']['color_contrast']
        assert type(data['design']['checks']) is dict
        assert type(check['details']) is dict
        assert check['details']['slides_checked'] == len(clean_presentation.slides)
        assert yaml.safe_load(yaml.safe_dump(data))['overall']['grade'] == 'A'


class TestFormatReport:
    """Tests for the text report."""

    @pytest.mark.asyncio
    async def test_passing_report(self, clean_presentation):
        text = await QualityChecker().generate_report(clean_presentation)
        lines = text.splitlines()

        assert lines[0] == '# Presentation Quality Report'
        assert '## Overall Score: 98.3/100 (Grade A)' in lines
        assert '✓ PASSED' in lines
        assert '## Design Quality: 99.0/100' in lines
        assert '- Visual Balance: 95.0/100 ✓' in lines
        assert '## Recommendations' not in lines

    @pytest.mark.asyncio
    async def test_failing_report_lists_recommendations(self, clean_presentation):
        report = await QualityChecker(min_score=95).check_presentation(
            replace(clean_presentation, html='')
        )
        text = format_report(report)

        assert '✗ FAILED' in text
        assert '- Keyboard Nav: 0.0/100 ✗' in text
        assert text.endswith('## Recommendations\n1. Implement keyboard navigation')
