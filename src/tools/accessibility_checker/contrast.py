"""
Accessibility Checker - Color contrast engine

Resolves the effective foreground/background solid fills of a node and
computes WCAG 2.1 relative luminance and contrast ratios.

Public API:
- resolve_fill(node) -> Paint | None
- resolve_background(node) -> Paint
- luminance(r, g, b) -> float
- contrast_ratio(fg, bg) -> float
- evaluate_text_contrast(node, ctx)
- evaluate_shape_contrast(node, ctx)
"""

import logging
from typing import Optional

from core.document_tree import VisualNode, Paint, WHITE_PAINT, NODE_TEXT
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    AccessibilityIssue,
    AccessibilitySeverity,
    AnalysisContext,
    BACKGROUND_NAME_PATTERNS,
    CONTRAST_SHAPE_TYPES,
)
from tools.accessibility_checker.geometry import is_visible
from tools.accessibility_checker.messages import get_message, format_number


logger = logging.getLogger(__name__)


def _first_solid(node: VisualNode) -> Optional[Paint]:
    try:
        for paint in node.fill_paints():
            if paint.is_solid:
                return paint
    except (AttributeError, TypeError) as e:
        logger.debug(f"Unreadable fills on {node.id}: {e}")
    return None


def resolve_fill(node: VisualNode) -> Optional[Paint]:
    """First visible SOLID paint in the node's own fills"""
    return _first_solid(node)


def resolve_background(node: VisualNode) -> Paint:
    """
    Nearest ancestor solid fill, excluding the node itself.

    Falls back to opaque white so a ratio can always be computed.
    """
    for ancestor in node.iter_ancestors():
        solid = _first_solid(ancestor)
        if solid is not None:
            return solid
    return WHITE_PAINT


def _linear_channel(c: float) -> float:
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def luminance(r: float, g: float, b: float) -> float:
    """WCAG relative luminance of an sRGB color with channels in [0, 1]"""
    # Rec. 709 coefficients used by WCAG
    return 0.2126 * _linear_channel(r) + 0.7152 * _linear_channel(g) + 0.0722 * _linear_channel(b)


def contrast_ratio(fg: Paint, bg: Paint) -> float:
    """Contrast ratio between two solid paints, 1 (identical) to 21 (black/white)"""
    l1 = luminance(*fg.color)
    l2 = luminance(*bg.color)
    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def is_likely_background_name(name: str) -> bool:
    if not name:
        return False
    lower = name.lower()
    return any(pattern in lower for pattern in BACKGROUND_NAME_PATTERNS)


def _has_visible_children(node: VisualNode) -> bool:
    return any(is_visible(child) for child in node.child_nodes())


def evaluate_text_contrast(node: VisualNode, ctx: AnalysisContext) -> None:
    """Flag TEXT nodes whose solid fill is below the contrast threshold (error)"""
    if node.type != NODE_TEXT or not is_visible(node):
        return
    fill = resolve_fill(node)
    if fill is None:
        # Gradient/image text cannot be evaluated
        return
    ratio = contrast_ratio(fill, resolve_background(node))
    if ratio >= ctx.min_contrast:
        return

    ctx.issues.append(AccessibilityIssue.for_node(
        node,
        check_type=AccessibilityCheckType.CONTRAST,
        severity=AccessibilitySeverity.ERROR,
        message=get_message("contrast.text.message", ctx.locale,
                            node_type=node.type,
                            ratio=format_number(ratio),
                            threshold=f"{ctx.min_contrast:g}"),
        suggestion=get_message("contrast.text.suggestion", ctx.locale),
    ))


def evaluate_shape_contrast(node: VisualNode, ctx: AnalysisContext) -> None:
    """Flag leaf shapes whose solid fill is below the contrast threshold (warn)"""
    if node.type not in CONTRAST_SHAPE_TYPES or not is_visible(node):
        return
    # Composite icons are assumed to compose their own contrast
    if _has_visible_children(node):
        return
    if is_likely_background_name(node.name):
        return
    fill = resolve_fill(node)
    if fill is None:
        return
    ratio = contrast_ratio(fill, resolve_background(node))
    if ratio >= ctx.min_contrast:
        return

    ctx.issues.append(AccessibilityIssue.for_node(
        node,
        check_type=AccessibilityCheckType.CONTRAST,
        severity=AccessibilitySeverity.WARNING,
        message=get_message("contrast.shape.message", ctx.locale,
                            ratio=format_number(ratio),
                            threshold=f"{ctx.min_contrast:g}"),
        suggestion=get_message("contrast.shape.suggestion", ctx.locale),
    ))
