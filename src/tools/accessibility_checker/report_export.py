"""
Accessibility Checker - Report export

Writes analysis results as JSON or CSV, and formats the plain-text report
printed by the command line checker.
"""

import csv
import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import List, TextIO, Union

from tools.accessibility_checker.accessibility_types import (
    AccessibilityAnalysisResult,
    AccessibilityCheckType,
    CHECK_TYPE_DISPLAY_NAMES,
)


logger = logging.getLogger(__name__)

CSV_HEADER = ['Check Type', 'Severity', 'Page', 'Node Name', 'Node ID', 'Issue Description', 'Recommendation']


def export_json(result: AccessibilityAnalysisResult, path: Union[str, Path]) -> Path:
    """Write the full result (summary and issues) as JSON"""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Report exported to: {path}")
    return path


def write_csv(result: AccessibilityAnalysisResult, stream: TextIO) -> None:
    """
    Write one row per issue, ordered by check type, then page.

    A summary block follows the issue rows after an empty row.
    """
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)

    for check_type in AccessibilityCheckType:
        issues_by_page = defaultdict(list)
        for issue in result.get_issues_by_type(check_type):
            issues_by_page[issue.page_name].append(issue)

        for page_name in sorted(issues_by_page):
            for issue in issues_by_page[page_name]:
                writer.writerow([
                    CHECK_TYPE_DISPLAY_NAMES[issue.check_type],
                    issue.severity.value,
                    issue.page_name,
                    issue.node_name,
                    issue.node_id,
                    issue.message,
                    issue.suggestion,
                ])

    writer.writerow([])
    writer.writerow(['--- SUMMARY ---'])
    writer.writerow(['Total Issues', result.total_issues])
    writer.writerow(['Errors', result.errors])
    writer.writerow(['Warnings', result.warnings])
    writer.writerow(['Nodes Checked', result.nodes_visited])


def export_csv(result: AccessibilityAnalysisResult, path: Union[str, Path]) -> Path:
    """Write the CSV report to a file"""
    path = Path(path)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        write_csv(result, f)
    logger.info(f"Report exported to: {path}")
    return path


def format_text_report(result: AccessibilityAnalysisResult) -> str:
    """Human-readable report grouped by check type"""
    lines: List[str] = []
    title = f"Accessibility report: {result.document_name}" if result.document_name else "Accessibility report"
    lines.append(title)
    lines.append(f"Scope: {result.scope}, minimum contrast {result.min_contrast:g}:1, "
                 f"{result.nodes_visited} nodes checked")
    lines.append("")

    if not result.issues:
        lines.append("No issues found.")
        return "\n".join(lines)

    for check_type in AccessibilityCheckType:
        issues = result.get_issues_by_type(check_type)
        if not issues:
            continue
        lines.append(f"=== {CHECK_TYPE_DISPLAY_NAMES[check_type].upper()} ({len(issues)}) ===")
        for issue in issues:
            location = f"{issue.page_name} / {issue.node_name}" if issue.page_name else issue.node_name
            lines.append(f"[{issue.severity.value.upper()}] {location} ({issue.node_id})")
            lines.append(f"    {issue.message}")
            lines.append(f"    -> {issue.suggestion}")
        lines.append("")

    lines.append(f"Total: {result.total_issues} issues ({result.errors} errors, {result.warnings} warnings)")
    return "\n".join(lines)
