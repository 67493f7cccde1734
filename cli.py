# Showmatch v1.0.0
#!/usr/bin/env python3
"""
Showmatch CLI

Command-line interface for normalizing and approximately comparing
rendered values stored in text files.
"""
import argparse
import json
import logging
import re
import sys
from pathlib import Path

from config import settings


def configure_logging():
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_replacement_rules(pairs: list, regex: bool) -> list:
    """Turn --replace OLD NEW pairs into normalizer replacement rules."""
    rules = []
    for old, new in pairs or []:
        rules.append((re.compile(old) if regex else old, new))
    return rules


def normalize_file(path: str, simplify: bool, replacements: list) -> int:
    """Print the canonical form of a file's contents."""
    from core import normalize

    text = Path(path).read_text(encoding="utf-8")
    form = normalize(text, simplify_sequences=simplify, replacements=replacements)
    print(form.text)
    return 0


def compare_files(
    expected_path: str,
    actual_path: str,
    simplify: bool,
    replacements: list,
    rtol: float,
    exact_floats: bool,
    full_paths: bool,
    path_detection: str,
    as_json: bool
) -> int:
    """Compare two rendered files and print the result. Returns the exit code."""
    from core import (
        normalize, compare, format_report,
        relative_tolerance, exact_match, make_path_detector
    )

    expected = normalize(
        Path(expected_path).read_text(encoding="utf-8"),
        simplify_sequences=simplify,
        replacements=replacements
    )
    actual = normalize(
        Path(actual_path).read_text(encoding="utf-8"),
        simplify_sequences=simplify,
        replacements=replacements
    )

    outcome = compare(
        actual,
        expected,
        float_match=exact_match if exact_floats else relative_tolerance(rtol),
        path_match=exact_match if full_paths else None,
        path_detector=make_path_detector(path_detection)
    )

    if as_json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print(f"\nComparing: {actual_path} vs {expected_path}")
        print("=" * 60)
        if outcome.matched:
            print(f"✅ Renderings match ({outcome.fields_compared} field(s) compared)")
        else:
            print(format_report(outcome))

    return 0 if outcome.matched else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description=f"{settings.APP_NAME} - approximate comparison of rendered values",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_normalize_arguments(sub):
        sub.add_argument("--no-simplify", action="store_true",
                         help="Keep every item of bracketed sequences")
        sub.add_argument("--replace", nargs=2, action="append", metavar=("OLD", "NEW"),
                         help="Substitution applied before normalization (repeatable)")
        sub.add_argument("--regex", action="store_true",
                         help="Treat --replace OLD values as regular expressions")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare two rendered files")
    compare_parser.add_argument("expected", help="Reference rendering")
    compare_parser.add_argument("actual", help="Rendering to check")
    add_normalize_arguments(compare_parser)
    compare_parser.add_argument("--rtol", type=float, default=settings.FLOAT_RTOL,
                                help="Relative tolerance for float fields")
    compare_parser.add_argument("--exact-floats", action="store_true",
                                help="Require float fields to be equal")
    compare_parser.add_argument("--full-paths", action="store_true",
                                help="Compare whole paths instead of their final component")
    compare_parser.add_argument("--path-detection", choices=["separator", "filesystem"],
                                default=settings.PATH_DETECTION,
                                help="How path fields are recognized")
    compare_parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")

    # normalize
    normalize_parser = subparsers.add_parser("normalize", help="Print the canonical form of a file")
    normalize_parser.add_argument("file", help="Rendering to normalize")
    add_normalize_arguments(normalize_parser)

    args = parser.parse_args(argv)
    configure_logging()

    if not args.command:
        parser.print_help()
        return 0

    replacements = build_replacement_rules(args.replace, args.regex)

    if args.command == "compare":
        return compare_files(
            args.expected,
            args.actual,
            not args.no_simplify,
            replacements,
            args.rtol,
            args.exact_floats,
            args.full_paths,
            args.path_detection,
            args.json
        )
    elif args.command == "normalize":
        return normalize_file(args.file, not args.no_simplify, replacements)

    return 0


if __name__ == "__main__":
    sys.exit(main())
