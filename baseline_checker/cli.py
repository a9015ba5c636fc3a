"""
Command-line interface: check files, browse feature data, manage config.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings, create_sample_config, load_config
from .errors import BaselineCheckError, format_error
from .issue import FeatureRecord, Severity, Tier
from .main_checker import BaselineChecker, FileResult, create_resolver, discover_files
from .reporter import ReportGenerator, score_color
from .utils import colorize, configure_logging
from .validation import OUTPUT_FORMATS, validate_level, validate_options

DEFAULT_PATHS = ["./src", "./styles", "./*.css", "./*.js"]

_CYAN = "\033[36m"
_GRAY = "\033[90m"

_STATUS_TIERS = {
    "widely": Tier.WIDELY,
    "newly": Tier.NEWLY,
    "limited": Tier.LIMITED,
}
_STATUS_ICONS = {
    Tier.WIDELY: "✅",
    Tier.NEWLY: "⚠️",
}
_STATUS_TEXT = {
    Tier.WIDELY: ("Widely Available", "\033[32m"),
    Tier.NEWLY: ("Newly Available", "\033[33m"),
}


def _status_icon(tier: Tier) -> str:
    return _STATUS_ICONS.get(tier, "❌")


def _status_text(tier: Tier) -> str:
    text, color = _STATUS_TEXT.get(tier, ("Limited Availability", "\033[31m"))
    return colorize(text, color)


def _error(message: str, error: Optional[BaseException] = None) -> None:
    print(colorize(message, "\033[31m"), file=sys.stderr)
    if error is not None:
        print(colorize(format_error(error), "\033[90m"), file=sys.stderr)


def _apply_check_options(settings: Settings, args: argparse.Namespace) -> Settings:
    update = {}
    if args.level is not None:
        update["required_level"] = args.level.value
    if args.format is not None:
        update["format"] = args.format
    for flag in ("no_warnings", "fail_on_error", "css_only", "js_only"):
        if getattr(args, flag, False):
            update[flag] = True
    analysis = {}
    if getattr(args, "strict", False):
        analysis["strict_mode"] = True
    if args.batch_size is not None:
        analysis["batch_size"] = args.batch_size
    if analysis:
        update["analysis"] = settings.analysis.model_copy(update=analysis)
    return settings.model_copy(update=update)


def _resolve_paths(paths: List[str]) -> List[str]:
    if paths:
        return paths
    return [p for p in DEFAULT_PATHS if "*" in p or Path(p).exists()]


def _run_files(settings: Settings, paths: List[str]) -> List[FileResult]:
    files = discover_files(_resolve_paths(paths), settings.patterns, settings.css_only, settings.js_only)
    css_count = sum(1 for f in files if f.suffix.lower() == ".css")
    logging.getLogger(__name__).info(
        "Analyzing %d files (%d CSS, %d JS)", len(files), css_count, len(files) - css_count
    )
    checker = BaselineChecker(settings)
    return checker.check_files(files, settings.analysis.batch_size)


def cmd_check(args: argparse.Namespace) -> int:
    try:
        validate_options(vars(args))
        settings = _apply_check_options(load_config(args.config), args)
        results = _run_files(settings, args.paths)
    except BaselineCheckError as e:
        _error("Error during check:", e)
        return 1

    score = None
    if args.score or settings.format == "markdown":
        score = BaselineChecker.aggregate(results)["score"]

    if settings.format == "json":
        print(ReportGenerator.generate_json_report(results, score, errors_only=settings.no_warnings))
    elif settings.format == "markdown":
        from app.report_formatter import format_pr_comment

        report = BaselineChecker.aggregate(results, errors_only=settings.no_warnings)
        print(format_pr_comment(report))
    else:
        print(ReportGenerator.generate_text_report(results, score, errors_only=settings.no_warnings))

    if settings.fail_on_error:
        has_errors = any(
            r.failed or any(i.severity is Severity.ERROR for i in r.issues) for r in results
        )
        if has_errors:
            return 1
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    try:
        validate_options(vars(args))
        settings = _apply_check_options(load_config(args.config), args)
        results = _run_files(settings, args.paths or ["./src"])
    except BaselineCheckError as e:
        _error("Error calculating score:", e)
        return 1

    score = BaselineChecker.aggregate(results)["score"]
    summary = ReportGenerator.generate_summary(results)
    print()
    print(colorize("📊 Baseline Compatibility Score", "\033[1m"))
    print(colorize("─" * 50, "\033[90m"))
    print()
    print(f"  {colorize(f'{score}/100', score_color(score))}")
    print()
    print(colorize("Details:", "\033[1m"))
    print(f"  Total files analyzed: {summary['files']}")
    if summary["failed"]:
        print(f"  Files failed: {summary['failed']}")
    print(f"  Total checks: {summary['total']}")
    print(f"  Errors: {summary['errors']}")
    print(f"  Warnings: {summary['warnings']}")
    print()
    return 0


def _load_resolver(config_path: Optional[str]):
    return create_resolver(load_config(config_path))


def _feature_date(feature: FeatureRecord) -> Optional[str]:
    return feature.status.since_low or feature.status.since_high


def cmd_list(args: argparse.Namespace) -> int:
    tier = _STATUS_TIERS[args.status]
    try:
        resolver = _load_resolver(args.config)
    except BaselineCheckError as e:
        _error("Configuration error:", e)
        return 1
    features = resolver.features_by_status(tier)
    if args.group:
        groups = {f.id for f in resolver.features_by_group(args.group)}
        features = [f for f in features if f.id in groups]

    if args.count:
        print(len(features))
        return 0

    print(colorize(f"\n{args.status.upper()} Available Features ({len(features)}):\n", "\033[1m"))
    for feature in features[:50]:
        date = _feature_date(feature)
        print(colorize(f"  • {feature.name}", "\033[36m"))
        print(colorize(f"    {feature.id}{f' - since {date}' if date else ''}", "\033[90m"))
        if feature.description:
            print(colorize(f"    {feature.description[:80]}...", "\033[90m"))
        print()
    if len(features) > 50:
        print(colorize(f"  ... and {len(features) - 50} more\n", "\033[90m"))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    try:
        resolver = _load_resolver(args.config)
    except BaselineCheckError as e:
        _error("Configuration error:", e)
        return 1
    results = resolver.search_features(args.query)
    if not results:
        print(colorize(f'\nNo features found matching "{args.query}"\n', "\033[33m"))
        return 0

    print(colorize(f"\nFound {len(results)} features:\n", "\033[1m"))
    for feature in results[:20]:
        name = colorize(feature.name, _CYAN)
        ident = colorize(f"({feature.id})", _GRAY)
        print(f"{_status_icon(feature.status.tier)} {name} {ident}")
        if feature.description:
            print(colorize(f"  {feature.description[:100]}...", "\033[90m"))
        print()
    if len(results) > 20:
        print(colorize(f"... and {len(results) - 20} more results\n", "\033[90m"))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    try:
        resolver = _load_resolver(args.config)
    except BaselineCheckError as e:
        _error("Configuration error:", e)
        return 1
    feature = resolver.get_feature_status(args.feature_id)
    if feature is None:
        _error(f'Feature "{args.feature_id}" not found')
        return 1

    status = feature.status
    group = ", ".join(feature.group) if isinstance(feature.group, list) else feature.group
    print()
    print(colorize(feature.name, "\033[1;36m"))
    print(colorize("─" * 50, "\033[90m"))
    print()
    print(f"Status: {_status_icon(status.tier)} {_status_text(status.tier)}")
    print(f"Group: {group or '-'}")
    if status.since_low:
        print(f"Newly Available Since: {status.since_low}")
    if status.since_high:
        print(f"Widely Available Since: {status.since_high}")
    print()
    print("Browser Support:")
    for browser, version in status.support.items():
        print(f"  {browser:<18} {version}")
    if feature.description:
        print()
        print("Description:")
        print(f"  {feature.description}")
    print()
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    try:
        if args.init:
            path = create_sample_config(args.path)
            print(colorize(f"✓ Created sample configuration file: {path}", "\033[32m"))
            print(colorize("Edit this file to customize your baseline-checker settings.", "\033[90m"))
        elif args.show:
            settings = load_config(args.config)
            print(colorize("\n📋 Current Configuration:\n", "\033[1m"))
            print(json.dumps(settings.to_dict(), indent=2))
        else:
            print(colorize("Use --init to create a sample config or --show to display current config.", "\033[33m"))
    except (BaselineCheckError, OSError) as e:
        _error("Configuration error:", e)
        return 1
    return 0


def cmd_comment(args: argparse.Namespace) -> int:
    from app.report_formatter import format_pr_comment

    try:
        with open(args.results_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        _error(f"Error generating PR comment: {e}")
        return 1
    if not isinstance(data.get("results"), list):
        _error("Error generating PR comment: invalid results format, missing results array")
        return 1
    print(format_pr_comment(data, args.previous_score, args.repo_owner or "", args.repo_name or ""))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    try:
        settings = load_config(args.config)
    except BaselineCheckError as e:
        _error("Configuration error:", e)
        return 1
    host = args.host or settings.dashboard.host
    port = args.port or settings.dashboard.port
    uvicorn.run("app.main:app", host=host, port=port, reload=args.reload)
    return 0


def _level_arg(value: str):
    try:
        return validate_level(value)
    except BaselineCheckError as e:
        raise argparse.ArgumentTypeError(e.message)


def _add_scan_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="*", help="Files, directories or glob patterns")
    parser.add_argument("-l", "--level", type=_level_arg, default=None,
                        help="Baseline level: widely|newly (default from config: newly)")
    parser.add_argument("--css-only", action="store_true", help="Check only CSS files")
    parser.add_argument("--js-only", action="store_true", help="Check only JavaScript files")
    parser.add_argument("--batch-size", type=int, default=None, metavar="N",
                        help="Files analyzed concurrently per batch (default: 25)")
    parser.add_argument("--strict", action="store_true", help="Treat any JavaScript syntax error as fatal")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="baseline-checker",
        description="Check web features for Baseline compatibility",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    common.add_argument("-c", "--config", metavar="PATH", help="Path to configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", parents=[common], help="Check CSS/JS files for Baseline compatibility")
    _add_scan_options(check)
    check.add_argument("-f", "--format", choices=OUTPUT_FORMATS, default=None,
                       help="Output format")
    check.add_argument("--no-warnings", action="store_true", help="Hide warnings, show only errors")
    check.add_argument("--fail-on-error", action="store_true", help="Exit 1 if errors are found")
    check.add_argument("--score", action="store_true", help="Calculate and show Baseline score")
    check.set_defaults(func=cmd_check)

    score = sub.add_parser("score", parents=[common], help="Calculate Baseline compatibility score (0-100)")
    _add_scan_options(score)
    score.set_defaults(func=cmd_score, format=None)

    lst = sub.add_parser("list", parents=[common], help="List features by Baseline status")
    lst.add_argument("status", choices=sorted(_STATUS_TIERS))
    lst.add_argument("-g", "--group", help="Filter by group (css, javascript, ...)")
    lst.add_argument("--count", action="store_true", help="Show count only")
    lst.set_defaults(func=cmd_list)

    search = sub.add_parser("search", parents=[common], help="Search for web features")
    search.add_argument("query")
    search.set_defaults(func=cmd_search)

    info = sub.add_parser("info", parents=[common], help="Detailed information about a feature")
    info.add_argument("feature_id")
    info.set_defaults(func=cmd_info)

    config = sub.add_parser("config", parents=[common], help="Configuration management")
    config.add_argument("--init", action="store_true", help="Create a sample configuration file")
    config.add_argument("--show", action="store_true", help="Show current configuration")
    config.add_argument("--path", default="baseline-lint.json", help="Where --init writes the file")
    config.set_defaults(func=cmd_config)

    comment = sub.add_parser("comment", parents=[common], help="Render a JSON report as a Markdown PR comment")
    comment.add_argument("results_file")
    comment.add_argument("--previous-score", type=int, default=None)
    comment.add_argument("--repo-owner")
    comment.add_argument("--repo-name")
    comment.set_defaults(func=cmd_comment)

    serve = sub.add_parser("serve", parents=[common], help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else None)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
