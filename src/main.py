"""
Design Accessibility Checker - Main entry point

Launches the tabbed application (default) or runs the checks headless:

    design-a11y gui [document.json]
    design-a11y check document.json --scope page --min-contrast 4.5 --format json
    design-a11y check --figma-file KEY --disable auto-content

The check command exits 0 when no issues are found, 1 when there are
issues and 2 when the document cannot be loaded.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add this directory to the Python path so core/tools import when run as a script
sys.path.append(str(Path(__file__).parent))

from core.cloud.figma_client import FigmaFileClient
from core.document_reader import DocumentReader, DocumentLoadError
from tools.accessibility_checker.accessibility_analyzer import AccessibilityAnalyzer
from tools.accessibility_checker.accessibility_config import (
    SCOPE_DOCUMENT,
    VALID_SCOPES,
    coerce_min_contrast,
)
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    CHECK_TYPE_CONFIG_KEYS,
    DEFAULT_MIN_CONTRAST,
)
from tools.accessibility_checker.messages import DEFAULT_LOCALE, SUPPORTED_LOCALES
from tools.accessibility_checker.report_export import (
    export_csv,
    export_json,
    format_text_report,
    write_csv,
)


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_LOAD_ERROR = 2

COMMANDS = ("gui", "check")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="design-a11y",
        description="Check design documents for accessibility issues",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    gui = subparsers.add_parser("gui", help="Launch the desktop application (default)")
    gui.add_argument("document", nargs="?", help="Document JSON to open on startup")

    check = subparsers.add_parser("check", help="Run the checks without a window")
    source = check.add_mutually_exclusive_group(required=True)
    source.add_argument("document", nargs="?", help="Document JSON export")
    source.add_argument("--figma-file", metavar="KEY", help="Fetch the document from the Figma REST API")
    check.add_argument("--scope", choices=VALID_SCOPES, default=SCOPE_DOCUMENT,
                       help="Nodes to check (default: document)")
    check.add_argument("--min-contrast", type=float, default=DEFAULT_MIN_CONTRAST,
                       help="Minimum contrast ratio (default: 3)")
    check.add_argument("--disable", action="append", default=[], metavar="RULE",
                       choices=[t.value for t in AccessibilityCheckType],
                       help="Skip a check; may be repeated")
    check.add_argument("--locale", choices=SUPPORTED_LOCALES, default=DEFAULT_LOCALE,
                       help="Message language")
    check.add_argument("--format", choices=("text", "json", "csv"), default="text",
                       help="Report format (default: text)")
    check.add_argument("--output", "-o", help="Write the report to a file instead of stdout")
    check.add_argument("-v", "--verbose", action="store_true", dest="check_verbose",
                       help="Enable debug logging")
    return parser


def load_source(args: argparse.Namespace):
    """Load the document named on the command line; raises DocumentLoadError"""
    if args.figma_file:
        return FigmaFileClient().load_document(args.figma_file)
    return DocumentReader().load_file(args.document)


def run_check(args: argparse.Namespace) -> int:
    try:
        document = load_source(args)
    except DocumentLoadError as e:
        logger.error(f"Could not load document: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    rules = {
        config_key: check_type.value not in args.disable
        for check_type, config_key in CHECK_TYPE_CONFIG_KEYS.items()
    }
    min_contrast = coerce_min_contrast(args.min_contrast)

    analyzer = AccessibilityAnalyzer(locale=args.locale)
    result = analyzer.run_checks(document, scope=args.scope, rules=rules, min_contrast=min_contrast)

    if args.format == "json":
        if args.output:
            export_json(result, args.output)
        else:
            print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif args.format == "csv":
        if args.output:
            export_csv(result, args.output)
        else:
            write_csv(result, sys.stdout)
    else:
        report = format_text_report(result)
        if args.output:
            Path(args.output).write_text(report + "\n", encoding="utf-8")
        else:
            print(report)

    return EXIT_ISSUES if result.total_issues else EXIT_OK


def run_gui(document_path: Optional[str] = None) -> int:
    from core.app_window import DesignA11yCheckerApp

    app = DesignA11yCheckerApp()
    app.run(document_path)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status"""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not any(arg in COMMANDS or arg in ("-h", "--help") for arg in argv):
        argv.insert(len([a for a in argv if a in ("-v", "--verbose")]), "gui")

    args = build_parser().parse_args(argv)
    verbose = args.verbose or getattr(args, "check_verbose", False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "check":
        return run_check(args)
    return run_gui(getattr(args, "document", None))


if __name__ == "__main__":
    sys.exit(main())
