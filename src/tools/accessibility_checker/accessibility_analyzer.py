"""
Accessibility Analyzer - Core analysis engine for design document checks

This module walks a design document and runs the accessibility checks on
every node:
- Color independence (indicator rows that differ only by color)
- Contrast (text and leaf shapes against their resolved background)
- Auto-rotating content (carousels and banners without controls)

A run is a pure function of the document snapshot, the enabled rules and
the contrast threshold; all mutable state lives in a per-run AnalysisContext.
"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.document_provider import DocumentProvider
from core.document_tree import VisualNode, NODE_TEXT
from tools.accessibility_checker.accessibility_types import (
    AccessibilityAnalysisResult,
    AccessibilityCheckType,
    AnalysisContext,
    CHECK_TYPE_DISPLAY_NAMES,
    DEFAULT_MIN_CONTRAST,
)
from tools.accessibility_checker.accessibility_config import (
    SCOPE_PAGE,
    SCOPE_SELECTION,
    coerce_min_contrast,
    rules_from_payload,
)
from tools.accessibility_checker.auto_content_detector import check_auto_content_controls
from tools.accessibility_checker.contrast import evaluate_shape_contrast, evaluate_text_contrast
from tools.accessibility_checker.indicator_detector import check_color_independence
from tools.accessibility_checker.messages import DEFAULT_LOCALE


logger = logging.getLogger(__name__)


def gather_roots(document: DocumentProvider, scope: Optional[str]) -> List[VisualNode]:
    """
    Root nodes to walk for a scope.

    "selection" falls back to the current page when nothing is selected;
    unknown scopes mean the whole document.
    """
    if scope == SCOPE_SELECTION:
        selection = document.selection
        if selection:
            return selection
        return [document.current_page] if document.current_page is not None else []
    if scope == SCOPE_PAGE:
        return [document.current_page] if document.current_page is not None else []
    return document.root.child_nodes()


def traverse(root: VisualNode, visit: Callable[[VisualNode], None]) -> None:
    """Pre-order depth-first walk with an explicit stack"""
    stack = [root]
    while stack:
        node = stack.pop()
        visit(node)
        stack.extend(reversed(node.child_nodes()))


def run_checks_on_node(node: VisualNode, ctx: AnalysisContext) -> None:
    """Run every enabled check against one node"""
    ctx.nodes_visited += 1
    if ctx.is_rule_enabled(AccessibilityCheckType.COLOR_INDEPENDENCE):
        check_color_independence(node, ctx)
    if ctx.is_rule_enabled(AccessibilityCheckType.CONTRAST):
        if node.type == NODE_TEXT:
            evaluate_text_contrast(node, ctx)
        else:
            evaluate_shape_contrast(node, ctx)
    if ctx.is_rule_enabled(AccessibilityCheckType.AUTO_CONTENT):
        check_auto_content_controls(node, ctx)


class AccessibilityAnalyzer:
    """
    Analyzes design documents for accessibility issues.

    Single-flight: a run executes to completion on the calling thread; callers
    must not start overlapping runs on the same analyzer.
    """

    def __init__(self, logger_callback: Optional[Callable[[str], None]] = None,
                 progress_callback: Optional[Callable[[int, str], None]] = None,
                 locale: str = DEFAULT_LOCALE):
        self.log_callback = logger_callback or self._default_log
        self.progress_callback = progress_callback
        self.locale = locale

    def _default_log(self, message: str) -> None:
        """Default logging function"""
        logger.info(message)

    def _update_progress(self, percent: int, message: str) -> None:
        """Update progress if callback is set"""
        if self.progress_callback:
            self.progress_callback(percent, message)

    def run_checks(self, document: DocumentProvider, scope: Optional[str] = None,
                   rules: Optional[Dict[str, bool]] = None,
                   min_contrast: float = DEFAULT_MIN_CONTRAST) -> AccessibilityAnalysisResult:
        """
        Main entry point - checks the nodes under the scope's roots.

        Args:
            document: Document provider to read from
            scope: "selection", "page" or "document" (anything else means document)
            rules: Config-keyed enabled flags; missing keys are enabled
            min_contrast: Contrast threshold, already coerced to a positive number

        Returns:
            AccessibilityAnalysisResult with all findings
        """
        start_time = time.time()
        ctx = AnalysisContext(
            rules=dict(rules or {}),
            min_contrast=min_contrast,
            locale=self.locale,
        )
        effective_scope = scope if scope in (SCOPE_SELECTION, SCOPE_PAGE) else "document"

        self.log_callback("Starting accessibility analysis...")
        self._update_progress(5, "Collecting nodes...")

        roots = gather_roots(document, scope)
        self.log_callback(f"  Scope: {effective_scope} ({len(roots)} root nodes)")

        disabled = [CHECK_TYPE_DISPLAY_NAMES[t] for t in AccessibilityCheckType if not ctx.is_rule_enabled(t)]
        if disabled:
            self.log_callback(f"  Skipping (disabled in settings): {', '.join(disabled)}")

        for index, root in enumerate(roots):
            percent = 10 + int(85 * index / max(len(roots), 1))
            self._update_progress(percent, f"Checking {root.name or root.id}...")
            traverse(root, lambda node: run_checks_on_node(node, ctx))

        result = AccessibilityAnalysisResult(
            document_name=getattr(document, 'name', ''),
            scope=effective_scope,
            min_contrast=min_contrast,
            issues=list(ctx.issues),
            nodes_visited=ctx.nodes_visited,
        )
        result.update_counts()
        result.analysis_timestamp = datetime.now().isoformat()
        result.analysis_duration_ms = int((time.time() - start_time) * 1000)

        for check_type in AccessibilityCheckType:
            if ctx.is_rule_enabled(check_type):
                self.log_callback(f"  {CHECK_TYPE_DISPLAY_NAMES[check_type]}: "
                                  f"{result.issues_by_type[check_type]} issues")

        self._update_progress(100, "Analysis complete")
        self.log_callback(f"Analysis complete. Checked {result.nodes_visited} nodes, found "
                          f"{result.total_issues} issues ({result.errors} errors, {result.warnings} warnings)")
        return result

    def run_checks_from_payload(self, document: DocumentProvider,
                                payload: Optional[Dict[str, Any]]) -> AccessibilityAnalysisResult:
        """Run checks from a run-checks message payload, applying its defaults"""
        payload = payload if isinstance(payload, dict) else {}
        scope = payload.get('scope')
        return self.run_checks(
            document,
            scope=scope if isinstance(scope, str) else None,
            rules=rules_from_payload(payload.get('rules')),
            min_contrast=coerce_min_contrast(payload.get('minContrast')),
        )
