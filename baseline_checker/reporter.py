"""
Report generation for the Baseline compatibility checker.
"""

import json
from typing import Dict, List, Optional, Sequence

from .issue import Issue, Severity
from .main_checker import BaselineChecker, FileResult
from .utils import colorize

_ICONS = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}
_RED = "\033[31m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_GRAY = "\033[90m"
_BOLD = "\033[1m"


def score_color(score: int) -> str:
    if score >= 90:
        return _GREEN
    if score >= 70:
        return _YELLOW
    return _RED


class ReportGenerator:
    """Generate reports from file results."""

    @staticmethod
    def format_issue(issue: Issue, max_browsers: Optional[int] = None) -> str:
        location = f"{issue.line}:{issue.column}" if issue.line else "unknown"
        if issue.api is not None:
            subject = issue.api
        elif issue.value:
            subject = f"{issue.property}: {issue.value}"
        else:
            subject = issue.property
        text = f"  {_ICONS[issue.severity]} {location} - {subject}\n    {issue.message}"
        if issue.support:
            browsers = list(issue.support.items())
            if max_browsers is not None:
                browsers = browsers[:max_browsers]
            text += "\n    Support: " + ", ".join(f"{b} {v}" for b, v in browsers)
        return text

    @staticmethod
    def generate_text_report(
        results: Sequence[FileResult],
        score: Optional[int] = None,
        show_info: bool = False,
        errors_only: bool = False,
    ) -> str:
        """Generate a text report grouped by file.

        Compatible informational issues are hidden unless `show_info` is set.
        """
        report: List[str] = []
        total_errors = 0
        total_warnings = 0
        files_with_issues = 0

        failed = [r for r in results if r.failed]
        for result in results:
            if result.failed:
                continue
            shown = [
                i for i in result.visible_issues(errors_only)
                if i.severity is not Severity.INFO or show_info or not i.compatible
            ]
            if not shown:
                continue
            files_with_issues += 1
            total_errors += sum(1 for i in shown if i.severity is Severity.ERROR)
            total_warnings += sum(1 for i in shown if i.severity is Severity.WARNING)
            icon = "🎨" if result.type == "css" else "⚡"
            report.append(f"{icon} {colorize(result.file, _BOLD)}")
            report.append(colorize("─" * min(len(result.file), 60), _GRAY))
            # JS issues list a shorter support line
            max_browsers = 3 if result.type == "js" else None
            report.append("\n\n".join(ReportGenerator.format_issue(i, max_browsers) for i in shown))
            report.append("")

        if not report and not failed:
            text = colorize("\n✓ No Baseline issues found!\n", _GREEN)
            if score is not None:
                text += "\n" + colorize(f"📊 Score: {score}/100", score_color(score)) + "\n"
            return text

        header = [colorize("\n📊 Baseline Compatibility Report\n", _BOLD)]
        if score is not None:
            header.append(colorize(f"Score: {score}/100\n", score_color(score)))

        footer = []
        for result in failed:
            footer.append(colorize(f"✗ {result.file}: {result.error}", _RED))
        if failed:
            footer.append("")
        footer.append(colorize("─" * 50, _GRAY))
        footer.append(colorize("Summary:", _BOLD))
        footer.append(f"  Files with issues: {files_with_issues}")
        if failed:
            footer.append(f"  Files failed: {len(failed)}")
        footer.append(f"  {colorize('Errors:', _RED)} {total_errors}")
        footer.append(f"  {colorize('Warnings:', _YELLOW)} {total_warnings}")
        footer.append("")
        return "\n".join(header + report + footer)

    @staticmethod
    def generate_json_report(
        results: Sequence[FileResult],
        score: Optional[int] = None,
        errors_only: bool = False,
    ) -> str:
        data = BaselineChecker.aggregate(results, with_score=False, errors_only=errors_only)
        data["score"] = score
        return json.dumps(data, indent=2, ensure_ascii=False)

    @staticmethod
    def generate_summary(results: Sequence[FileResult]) -> Dict[str, int]:
        """Counts by severity plus file totals."""
        summary = {
            "files": len(results),
            "failed": sum(1 for r in results if r.failed),
            "total": 0,
            "errors": 0,
            "warnings": 0,
            "info": 0,
        }
        for result in results:
            for issue in result.issues:
                summary["total"] += 1
                if issue.severity is Severity.ERROR:
                    summary["errors"] += 1
                elif issue.severity is Severity.WARNING:
                    summary["warnings"] += 1
                else:
                    summary["info"] += 1
        return summary
