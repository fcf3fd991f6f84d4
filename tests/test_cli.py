"""
Tests for the command-line interface
"""

import pytest
import yaml

from slide_designer.cli import EXIT_ERROR, EXIT_OK, EXIT_QUALITY_FAILED, main, parse_arguments

from conftest import ACCESSIBLE_HTML


@pytest.fixture
def presentation_file(tmp_path):
    document = {
        'title': 'Quarterly Review',
        'slides': [
            {
                'number': 1,
                'title': 'Highlights',
                'content': '- Revenue is up.\n- Costs are flat.',
                'layout': 'title-left-content-right',
                'backgroundColor': '#ffffff',
                'textColor': '#1e293b',
                'images': [{'url': 'chart.png', 'alt': 'Revenue chart'}],
            },
        ],
    }
    path = tmp_path / 'presentation.yaml'
    path.write_text(yaml.safe_dump(document), encoding='utf-8')
    return path


class TestParseArguments:
    """Tests for argument parsing."""

    def test_design_command(self):
        args = parse_arguments(['design', 'deck.md', '--theme', 'dark'])
        assert args.command == 'design'
        assert args.content == 'deck.md'
        assert args.theme == 'dark'

    def test_check_command(self):
        args = parse_arguments(['--config', 'c.yaml', 'check', 'deck.yaml', '--min-score', '80'])
        assert args.config == 'c.yaml'
        assert args.min_score == 80.0

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])


class TestDesignCommand:
    """Tests for the design subcommand."""

    def test_writes_designs(self, deck_file, tmp_path):
        output = tmp_path / 'out' / 'designs.yaml'
        assert main(['design', str(deck_file), '--output', str(output)]) == EXIT_OK

        document = yaml.safe_load(output.read_text(encoding='utf-8'))
        assert [s['layout'] for s in document['slides']] == [
            'title-centered', 'title-left-content-right', 'visual-dominant',
        ]
        assert document['palette']['background'] == '#fef3c7'
        assert 'failures' not in document

    def test_theme_flag_overrides_config(self, tmp_path, capsys):
        deck = tmp_path / 'deck.md'
        deck.write_text('# Only\n- one point\n', encoding='utf-8')
        assert main(['design', str(deck), '--theme', 'dark']) == EXIT_OK

        document = yaml.safe_load(capsys.readouterr().out)
        assert document['palette']['background'] == '#0f172a'

    def test_stdout_is_a_yaml_document(self, deck_file, capsys):
        assert main(['design', str(deck_file)]) == EXIT_OK
        captured = capsys.readouterr()

        document = yaml.safe_load(captured.out)
        assert isinstance(document, dict)
        assert [s['slide_id'] for s in document['slides']] == ['cover', 'plan', 'slide-3']
        assert 'Slide Designer' in captured.err

    def test_content_from_config_paths(self, deck_file, tmp_path):
        config = tmp_path / 'config.yaml'
        config.write_text(f'paths:\n  content: {deck_file.name}\n', encoding='utf-8')
        assert main(['--config', str(config), 'design']) == EXIT_OK

    def test_dense_slide_fails(self, tmp_path, capsys):
        deck = tmp_path / 'deck.md'
        bullets = '\n'.join(f'- point {name}' for name in 'abcdefgh')
        deck.write_text(f'# Dense\n{bullets}\n', encoding='utf-8')

        assert main(['design', str(deck)]) == EXIT_ERROR
        captured = capsys.readouterr()
        document = yaml.safe_load(captured.out)
        assert document['failures'] == [
            {'slide_id': 'slide-1', 'title': 'Dense', 'bullet_count': 8},
        ]
        assert 'Split into multiple slides' in captured.err

    def test_missing_deck(self, tmp_path):
        assert main(['design', str(tmp_path / 'missing.md')]) == EXIT_ERROR

    def test_missing_config(self, tmp_path):
        assert main(['--config', str(tmp_path / 'nope.yaml'), 'design', 'deck.md']) == EXIT_ERROR


class TestCheckCommand:
    """Tests for the check subcommand."""

    def test_passing_presentation(self, presentation_file, tmp_path, capsys):
        html = tmp_path / 'deck.html'
        html.write_text(ACCESSIBLE_HTML, encoding='utf-8')

        assert main(['check', str(presentation_file), '--html', str(html)]) == EXIT_OK
        out = capsys.readouterr().out
        assert '# Presentation Quality Report' in out
        assert '✓ PASSED' in out

    def test_min_score_flag(self, presentation_file):
        assert main(['check', str(presentation_file), '--min-score', '99']) == EXIT_QUALITY_FAILED

    def test_malformed_presentation(self, tmp_path):
        path = tmp_path / 'broken.yaml'
        path.write_text('title: Deck\nslides:\n  - number: one\n', encoding='utf-8')
        assert main(['check', str(path)]) == EXIT_ERROR
