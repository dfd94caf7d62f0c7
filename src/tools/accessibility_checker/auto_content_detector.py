"""
Accessibility Checker - Auto-rotating content detection

Infers carousels, sliders and rolling banners from node names and text
(English and Korean keywords, "2 / 5" slide counters) and checks that the
widget exposes previous/next, pause or full-view controls.

Matching is deliberately over-inclusive: a missed carousel is worse than an
extra warning.
"""

import logging
import re
from typing import List

from core.document_tree import VisualNode, NODE_TEXT
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    AccessibilityIssue,
    AccessibilitySeverity,
    AnalysisContext,
    AUTO_CONTENT_KEYWORDS,
    FULL_VIEW_KEYWORDS,
    NEXT_KEYWORDS,
    PAUSE_GLYPHS,
    PAUSE_TEXT_KEYWORDS,
    PREV_KEYWORDS,
    SLIDE_INDEX_PATTERN,
)
from tools.accessibility_checker.geometry import is_visible, nearby
from tools.accessibility_checker.indicator_detector import collect_nodes
from tools.accessibility_checker.messages import get_message


logger = logging.getLogger(__name__)

SLIDE_INDEX_REGEX = re.compile(SLIDE_INDEX_PATTERN)


def gather_text_tokens(node: VisualNode) -> List[str]:
    """Lower-cased names and TEXT contents of a node and its visible descendants"""
    tokens = []
    stack = [node]
    while stack:
        current = stack.pop()
        tokens.append(current.name.lower())
        if current.type == NODE_TEXT:
            tokens.append(current.text().lower())
        stack.extend(child for child in reversed(current.child_nodes()) if is_visible(child))
    return tokens


def includes_keyword(tokens: List[str], keywords: List[str]) -> bool:
    return any(keyword in token for keyword in keywords for token in tokens)


def text_has_pause_cue(text: str) -> bool:
    lower = text.lower()
    if any(keyword in lower for keyword in PAUSE_TEXT_KEYWORDS):
        return True
    return any(glyph in text for glyph in PAUSE_GLYPHS)


def is_pause_node(node: VisualNode) -> bool:
    """Name or text carries a pause/stop/play keyword or glyph"""
    if text_has_pause_cue(node.name):
        return True
    if node.type == NODE_TEXT and text_has_pause_cue(node.text()):
        return True
    return False


def is_slide_index_node(node: VisualNode) -> bool:
    return node.type == NODE_TEXT and SLIDE_INDEX_REGEX.fullmatch(node.text()) is not None


def _issue(node: VisualNode, ctx: AnalysisContext, kind: str) -> AccessibilityIssue:
    return AccessibilityIssue.for_node(
        node,
        check_type=AccessibilityCheckType.AUTO_CONTENT,
        severity=AccessibilitySeverity.WARNING,
        message=get_message(f"auto.{kind}.message", ctx.locale),
        suggestion=get_message(f"auto.{kind}.suggestion", ctx.locale),
    )


def check_auto_content_controls(node: VisualNode, ctx: AnalysisContext) -> None:
    """
    Check one container (and its whole subtree) for rotation controls.

    Nested containers are evaluated independently when the walk reaches them,
    so a carousel inside a section can be reported by both.
    """
    if not is_visible(node):
        return

    tokens = gather_text_tokens(node)
    combined = " ".join(tokens)
    slide_index_nodes = collect_nodes(node, is_slide_index_node)

    likely_auto = bool(slide_index_nodes) or includes_keyword([combined], AUTO_CONTENT_KEYWORDS)
    if not likely_auto:
        return

    pause_nodes = collect_nodes(node, is_pause_node)
    has_prev = includes_keyword(tokens, PREV_KEYWORDS)
    has_next = includes_keyword(tokens, NEXT_KEYWORDS)
    has_full = includes_keyword(tokens, FULL_VIEW_KEYWORDS)
    has_pause = bool(pause_nodes) or includes_keyword(tokens, PAUSE_TEXT_KEYWORDS)

    if slide_index_nodes:
        # A visible slide counter needs its own pause control close by
        for index_node in slide_index_nodes:
            if text_has_pause_cue(index_node.text()):
                continue
            if any(nearby(index_node, pause_node) for pause_node in pause_nodes):
                continue
            logger.debug(f"Slide index {index_node.id} in {node.id} has no pause control nearby")
            ctx.issues.append(_issue(node, ctx, "slide_index"))
            return

    if has_pause or has_full or (has_prev and has_next):
        return
    ctx.issues.append(_issue(node, ctx, "generic"))
