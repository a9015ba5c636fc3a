"""Format aggregate results as a Markdown pull-request comment."""

from typing import Any, Dict, List, Optional, Tuple

# property -> value -> suggestion ("*" matches any value)
_CSS_FIXES: Dict[str, Dict[str, str]] = {
    "word-break": {"auto-phrase": "Use `word-break: break-word` for wider support"},
    "container-type": {"inline-size": "Add fallback: `width: 100%; container-type: inline-size;`"},
    "container-query-length": {"*": "Use media queries as fallback for older browsers"},
    "backdrop-filter": {"*": "Add `-webkit-backdrop-filter` prefix for Safari support"},
    "aspect-ratio": {"*": "Use padding-bottom hack: `padding-bottom: 56.25%; /* 16:9 */`"},
    "text-wrap": {"*": "Leave unbalanced text as the fallback; it degrades gracefully"},
}

_JS_FIXES: Dict[str, str] = {
    "Array.prototype.at": "Use `arr[arr.length - 1]` instead of `arr.at(-1)`",
    "Array.prototype.findLast": "Use `[...arr].reverse().find()` for older browsers",
    "Object.hasOwn": "Use `Object.prototype.hasOwnProperty.call(obj, prop)`",
    "String.prototype.replaceAll": "Use `str.replace(/pattern/g, replacement)`",
    "Promise.allSettled": "Use Promise.all with .catch() for each promise",
    "structuredClone": "Use `JSON.parse(JSON.stringify())` or a deep clone library",
    "AbortController": "Add polyfill or use setTimeout/clearTimeout pattern",
    "ResizeObserver": "Add polyfill or use window resize events",
    "IntersectionObserver": "Add polyfill or use scroll event listeners",
}

_BROWSER_NAMES = {
    "chrome": "Chrome",
    "firefox": "Firefox",
    "safari": "Safari",
    "edge": "Edge",
}


def fix_suggestion(issue: Dict[str, Any], file_type: Optional[str]) -> str:
    """Suggest a fix for one issue (wire-format dict)."""
    if file_type == "css":
        by_value = _CSS_FIXES.get(issue.get("property") or "", {})
        if issue.get("value") in by_value:
            return by_value[issue["value"]]
        if "*" in by_value:
            return by_value["*"]
    elif issue.get("api") in _JS_FIXES:
        return _JS_FIXES[issue["api"]]

    baseline = issue.get("baseline")
    if baseline is False:
        if file_type == "css":
            return "Consider using widely supported alternatives"
        return "Add polyfill or use alternative implementation"
    if baseline == "low":
        return "Consider adding fallback for older browsers"
    return "Review browser support requirements"


def browser_support(issue: Dict[str, Any]) -> Optional[str]:
    support = issue.get("support")
    if not support:
        return None
    supported = []
    missing = []
    for browser, version in support.items():
        name = _BROWSER_NAMES.get(browser, browser)
        if version:
            supported.append(f"{name} {version}+")
        else:
            missing.append(name)
    if missing:
        return f"❌ Missing: {', '.join(missing)}"
    return f"✅ {', '.join(supported)}"


def priority(issue: Dict[str, Any]) -> Tuple[str, str]:
    """(icon, level) for an issue."""
    if issue.get("severity") == "error" or issue.get("baseline") is False:
        return "🔴", "Critical"
    if issue.get("severity") == "warning" or issue.get("baseline") == "low":
        return "🟡", "Warning"
    return "🔵", "Info"


def _issue_block_md(issue: Dict[str, Any], file: str, file_type: Optional[str]) -> List[str]:
    icon, _ = priority(issue)
    if issue.get("api"):
        feature = issue["api"]
    elif issue.get("value"):
        feature = f"{issue.get('property')}: {issue['value']}"
    else:
        feature = issue.get("property")
    column = f":{issue['column']}" if issue.get("column") else ""
    lines = [f"{icon} **{file}:{issue.get('line') or '?'}{column}**"]
    lines.append(f"- `{feature}`")
    lines.append(f"- {issue.get('message')}")
    support = browser_support(issue)
    if support:
        lines.append(f"- {support}")
    lines.append(f"- **Fix:** {fix_suggestion(issue, file_type)}")
    lines.append("")
    return lines


def _footer(repo_owner: str = "", repo_name: str = "") -> List[str]:
    lines = ["### Quick Actions", ""]
    lines.append("- 📊 [View detailed baseline guide](https://web.dev/baseline/)")
    lines.append("- 🔧 Fix locally: `baseline-checker check ./src --score`")
    lines.append("- 📚 [Learn about Baseline](https://github.com/web-platform-dx/web-features)")
    if repo_owner and repo_name:
        lines.append(f"- 📋 [Workflow logs](https://github.com/{repo_owner}/{repo_name}/actions)")
    lines.append("")
    lines.append("---")
    lines.append("*Generated by baseline-checker*")
    return lines


def format_pr_comment(
    report: Dict[str, Any],
    previous_score: Optional[int] = None,
    repo_owner: str = "",
    repo_name: str = "",
    include_info: bool = False,
) -> str:
    """Render `{results, score}` as Markdown.

    Compatible informational issues are left out unless `include_info`.
    """
    results = report.get("results") or []
    score = report.get("score")
    if score is None:
        score = 100

    change = ""
    if previous_score is not None:
        diff = score - previous_score
        if diff > 0:
            change = f" (+{diff} from last PR)"
        elif diff < 0:
            change = f" ({diff} from last PR)"

    lines = ["## 🎯 Baseline Compatibility Report", ""]
    lines.append(f"**Score:** {score}/100{change}")
    lines.append("")

    shown: List[Tuple[str, Optional[str], Dict[str, Any]]] = []
    failed = []
    for result in results:
        if result.get("failed"):
            failed.append(result)
            continue
        for issue in result.get("issues") or []:
            if include_info or issue.get("severity") != "info" or not issue.get("compatible", True):
                shown.append((result.get("file"), result.get("type"), issue))

    critical = sum(1 for _, _, i in shown if priority(i)[1] == "Critical")
    warnings = sum(1 for _, _, i in shown if priority(i)[1] == "Warning")

    if not shown and not failed:
        lines.append("🎉 **Perfect! No baseline compatibility issues found.**")
        lines.append("")
        lines.append("All CSS and JavaScript features are widely supported across browsers.")
        lines.append("")
        return "\n".join(lines + _footer(repo_owner, repo_name))

    if shown:
        lines.append(f"### Issues Found ({len(shown)}):")
        lines.append("")
        for file, file_type, issue in shown:
            lines.extend(_issue_block_md(issue, file, file_type))

    if failed:
        lines.append(f"### Files Not Analyzed ({len(failed)}):")
        lines.append("")
        for result in failed:
            lines.append(f"- **{result.get('file')}**: {result.get('error')}")
        lines.append("")

    lines.append("### Summary")
    lines.append("")
    if critical:
        lines.append(f"- 🔴 **{critical} critical issue{'s' if critical != 1 else ''}** (limited browser support)")
    if warnings:
        lines.append(f"- 🟡 **{warnings} warning{'s' if warnings != 1 else ''}** (newly available features)")
    if critical:
        lines.append("- **Recommendation:** Fix critical issues before merge")
    elif warnings:
        lines.append("- **Recommendation:** Consider fixes if targeting older browsers")
    lines.append("")
    return "\n".join(lines + _footer(repo_owner, repo_name))
