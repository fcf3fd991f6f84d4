"""Command-line interface for the slide designer."""

import argparse
import asyncio
import sys
import logging
from dataclasses import asdict, replace
from pathlib import Path

import yaml

from .config import Config, load_yaml_file
from .deck_designer import DeckDesigner
from .models import Presentation, SlideDesignError
from .pptx_loader import load_presentation
from .quality_checker import QualityChecker, format_report

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_QUALITY_FAILED = 2


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Decide slide layouts for a markdown deck and score rendered presentations.'
    )

    parser.add_argument(
        '--config',
        help='Path to configuration file (default: built-in defaults)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    design = subparsers.add_parser('design', help='Design every slide of a markdown deck')
    design.add_argument('content', nargs='?', help='Path to markdown deck (default: paths.content from config)')
    design.add_argument('--theme', help='Palette preset (overrides config)')
    design.add_argument('--domain', help='Deck domain used to infer a palette (overrides config)')
    design.add_argument('--output', help='Write designs as YAML to this file instead of stdout')

    check = subparsers.add_parser('check', help='Score a rendered presentation')
    check.add_argument('presentation', help='Path to a .pptx file or a YAML presentation document')
    check.add_argument('--html', help='HTML file emitted by the renderer (overrides document)')
    check.add_argument('--css', help='CSS file emitted by the renderer (overrides document)')
    check.add_argument('--min-score', type=float, help='Score needed to pass (overrides config)')

    return parser.parse_args(argv)


def _load_presentation(args: argparse.Namespace) -> Presentation:
    path = Path(args.presentation)
    if path.suffix.lower() == '.pptx':
        presentation = load_presentation(path)
    else:
        presentation = Presentation.from_dict(load_yaml_file(path))

    if args.html:
        presentation = replace(presentation, html=Path(args.html).read_text(encoding='utf-8'))
    if args.css:
        presentation = replace(presentation, css=Path(args.css).read_text(encoding='utf-8'))
    return presentation


def run_design(args: argparse.Namespace, config: Config) -> int:
    if args.theme:
        config.set('design.theme', args.theme)
    if args.domain:
        config.set('design.domain', args.domain)

    content_path = Path(args.content) if args.content else config.get_path('content')
    result = DeckDesigner(config).design_markdown_file(content_path)

    document = {
        'palette': asdict(result.palette),
        'slides': [design.to_dict() for design in result.designs],
    }
    if result.warnings:
        document['warnings'] = {k: list(v) for k, v in result.warnings.items()}
    if result.suggestions:
        document['suggestions'] = {k: list(v) for k, v in result.suggestions.items()}
    if result.failures:
        document['failures'] = [
            {'slide_id': e.slide_id, 'title': e.title, 'bullet_count': e.bullet_count}
            for e in result.failures
        ]

    output = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding='utf-8')
        print(f"Designs written to: {output_path}", file=sys.stderr)
    else:
        print(output)

    for failure in result.failures:
        print(f"Error: {failure}", file=sys.stderr)
    return EXIT_OK if result.succeeded else EXIT_ERROR


def run_check(args: argparse.Namespace, config: Config) -> int:
    if args.min_score is not None:
        checker = QualityChecker(min_score=args.min_score)
    else:
        checker = QualityChecker.from_config(config)

    presentation = _load_presentation(args)
    report = asyncio.run(checker.check_presentation(presentation))
    print(format_report(report))
    return EXIT_OK if report.overall.passed else EXIT_QUALITY_FAILED


def main(argv=None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error, 2 for a failed quality check)
    """
    args = parse_arguments(argv)

    # Load configuration
    try:
        config = Config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Please ensure the configuration file exists at: {args.config}", file=sys.stderr)
        return EXIT_ERROR
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    print("=" * 60, file=sys.stderr)
    print("Slide Designer", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"Configuration: {args.config or '<defaults>'}", file=sys.stderr)
    print(f"Command:       {args.command}", file=sys.stderr)
    print("=" * 60, file=sys.stderr)

    try:
        if args.command == 'design':
            return run_design(args, config)
        return run_check(args, config)
    except (FileNotFoundError, ValueError, SlideDesignError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:
        logging.exception("Unexpected error")
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
