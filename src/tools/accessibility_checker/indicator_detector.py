"""
Accessibility Checker - Color-only indicator detection

Finds rows of small, same-shaped dots (page indicators, step markers) whose
active item differs from its siblings only by fill color.

Pipeline per container:
- Collect indicator candidates (small, unstroked, unshadowed leaf shapes)
- Join candidates whose centers are close into connected clusters
- Validate each cluster's geometry (span, alignment, density)
- Split by fill color and pick the minority-colored focus items
- Report one issue per cluster, never twice for the same node in a run
"""

import logging
from collections import OrderedDict
from typing import Callable, List, Optional

from core.document_tree import VisualNode, NODE_ROOT
from tools.accessibility_checker.accessibility_types import (
    AccessibilityCheckType,
    AccessibilityIssue,
    AccessibilitySeverity,
    AnalysisContext,
    ClusterAnalysis,
    IndicatorCandidate,
    Rect,
    COLOR_INDICATOR_TYPES,
    INDICATOR_MIN_SIDE,
    INDICATOR_MAX_SHORT_SIDE,
    INDICATOR_MAX_LONG_SIDE,
    INDICATOR_MAX_ASPECT,
    INDICATOR_CLUSTER_GAP,
    INDICATOR_MAX_SPREAD,
    INDICATOR_MIN_CLUSTER_SIZE,
    INDICATOR_CROSS_AXIS_FACTOR,
    INDICATOR_ALONG_AXIS_FACTOR,
    INDICATOR_MAX_SIZE_RATIO,
    INDICATOR_MAX_ASPECT_RATIO,
)
from tools.accessibility_checker.contrast import resolve_fill
from tools.accessibility_checker.geometry import bounding_rect, is_visible, is_number
from tools.accessibility_checker.messages import get_message


logger = logging.getLogger(__name__)

_EPSILON = 0.001


def collect_nodes(node: VisualNode, predicate: Callable[[VisualNode], bool]) -> List[VisualNode]:
    """Pre-order list of visible nodes in a subtree matching predicate; hidden subtrees are pruned"""
    matches = []
    stack = [node]
    while stack:
        current = stack.pop()
        if not is_visible(current):
            continue
        if predicate(current):
            matches.append(current)
        stack.extend(reversed(current.child_nodes()))
    return matches


def has_visible_stroke(node: VisualNode) -> bool:
    try:
        strokes = node.stroke_paints()
        return any(p.is_solid for p in strokes) and node.stroke_weight != 0
    except (AttributeError, TypeError) as e:
        logger.debug(f"Unreadable strokes on {node.id}: {e}")
        return False


def has_effects(node: VisualNode) -> bool:
    try:
        return len(node.effect_list()) > 0
    except (AttributeError, TypeError) as e:
        logger.debug(f"Unreadable effects on {node.id}: {e}")
        return False


def is_indicator_candidate(node: VisualNode) -> bool:
    """Small, simple, filled leaf shape without stroke or effects"""
    if node.type not in COLOR_INDICATOR_TYPES:
        return False
    if not is_visible(node):
        return False
    if not is_number(node.width) or not is_number(node.height):
        return False

    width = abs(node.width)
    height = abs(node.height)
    long_side = max(width, height)
    short_side = min(width, height)
    if short_side < INDICATOR_MIN_SIDE or short_side > INDICATOR_MAX_SHORT_SIDE:
        return False
    if long_side > INDICATOR_MAX_LONG_SIDE:
        return False
    if long_side / max(short_side, _EPSILON) > INDICATOR_MAX_ASPECT:
        return False

    # Composite icons are not dots
    if any(is_visible(child) for child in node.child_nodes()):
        return False
    if resolve_fill(node) is None:
        return False
    if has_visible_stroke(node) or has_effects(node):
        return False
    return True


def color_key(fill) -> str:
    """Fill color quantized to 3 decimals per channel"""
    if fill is None or fill.color is None:
        return ""
    r, g, b = fill.color
    return f"{r:.3f}|{g:.3f}|{b:.3f}"


def rects_are_close(rect_a: Rect, rect_b: Rect) -> bool:
    """Size-adaptive proximity: larger shapes tolerate larger gaps"""
    allow_x = max(rect_a.width, rect_b.width) + INDICATOR_CLUSTER_GAP
    allow_y = max(rect_a.height, rect_b.height) + INDICATOR_CLUSTER_GAP
    return abs(rect_a.cx - rect_b.cx) <= allow_x and abs(rect_a.cy - rect_b.cy) <= allow_y


def _ratio(a: float, b: float) -> float:
    return max(a, b) / max(min(a, b), _EPSILON)


def analyze_cluster(cluster: List[IndicatorCandidate]) -> Optional[ClusterAnalysis]:
    """
    Validate a proximity cluster and pick its color-only focus items.

    Returns None when the cluster is too small, too spread out, not aligned on
    a line, single-colored, or has no focus item of a similar size and shape.
    """
    if len(cluster) < INDICATOR_MIN_CLUSTER_SIZE:
        return None

    rects = [item.rect for item in cluster]
    cx_list = [r.cx for r in rects]
    cy_list = [r.cy for r in rects]
    span_x = max(cx_list) - min(cx_list)
    span_y = max(cy_list) - min(cy_list)
    if max(span_x, span_y) > INDICATOR_MAX_SPREAD:
        return None

    avg_width = sum(r.width for r in rects) / len(rects)
    avg_height = sum(r.height for r in rects) / len(rects)

    horizontal = span_x >= span_y
    if horizontal and span_y > avg_height * INDICATOR_CROSS_AXIS_FACTOR:
        return None
    if not horizontal and span_x > avg_width * INDICATOR_CROSS_AXIS_FACTOR:
        return None

    primary_span = span_x if horizontal else span_y
    avg_primary_size = avg_width if horizontal else avg_height
    if primary_span > avg_primary_size * len(cluster) * INDICATOR_ALONG_AXIS_FACTOR:
        return None

    color_groups: "OrderedDict[str, List[IndicatorCandidate]]" = OrderedDict()
    for item in cluster:
        color_groups.setdefault(color_key(item.fill), []).append(item)
    if len(color_groups) < 2:
        return None

    # Largest color group is the inactive baseline; stable sort keeps first-seen order on ties
    groups = sorted(color_groups.values(), key=len, reverse=True)
    primary_group = groups[0]
    if len(primary_group) >= 2:
        primary_ids = {id(item) for item in primary_group}
        focus_candidates = [item for item in cluster if id(item) not in primary_ids]
    else:
        focus_candidates = list(cluster)

    avg_aspect = avg_width / max(avg_height, _EPSILON)
    focus_items = []
    for item in focus_candidates:
        width_ratio = _ratio(item.rect.width, avg_width)
        height_ratio = _ratio(item.rect.height, avg_height)
        item_aspect = item.rect.width / max(item.rect.height, _EPSILON)
        aspect_ratio = _ratio(item_aspect, avg_aspect)
        if (width_ratio <= INDICATOR_MAX_SIZE_RATIO
                and height_ratio <= INDICATOR_MAX_SIZE_RATIO
                and aspect_ratio <= INDICATOR_MAX_ASPECT_RATIO):
            focus_items.append(item)

    if not focus_items:
        return None
    return ClusterAnalysis(focus_items=focus_items, items=cluster)


def build_candidates(container: VisualNode) -> List[IndicatorCandidate]:
    candidates = []
    for node in collect_nodes(container, is_indicator_candidate):
        rect = bounding_rect(node)
        fill = resolve_fill(node)
        if rect is not None and fill is not None:
            candidates.append(IndicatorCandidate(node=node, rect=rect, fill=fill))
    return candidates


def cluster_candidates(candidates: List[IndicatorCandidate]) -> List[List[IndicatorCandidate]]:
    """Connected components of the proximity graph, found with an explicit stack"""
    visited = set()
    clusters = []
    for candidate in candidates:
        if candidate.node.id in visited:
            continue
        visited.add(candidate.node.id)
        stack = [candidate]
        cluster = []
        while stack:
            current = stack.pop()
            cluster.append(current)
            for other in candidates:
                if other.node.id in visited:
                    continue
                if rects_are_close(current.rect, other.rect):
                    visited.add(other.node.id)
                    stack.append(other)
        clusters.append(cluster)
    return clusters


def find_indicator_groups(container: Optional[VisualNode]) -> List[ClusterAnalysis]:
    """All validated indicator clusters under a container"""
    if container is None or not container.has_children_slot:
        return []
    candidates = build_candidates(container)
    if len(candidates) < INDICATOR_MIN_CLUSTER_SIZE:
        return []

    groups = []
    for cluster in cluster_candidates(candidates):
        analysis = analyze_cluster(cluster)
        if analysis is not None:
            groups.append(analysis)
    return groups


def check_color_independence(node: VisualNode, ctx: AnalysisContext) -> None:
    """
    Scan the parent and grandparent of an indicator-type node for color-only rows.

    Each container is scanned once per run and each node is reported at most
    once, so reaching the same row through siblings or through both parent
    and grandparent never duplicates an issue.
    """
    if node.type not in COLOR_INDICATOR_TYPES:
        return

    # Pages have separate coordinate spaces, so the document root is never a container
    containers = []
    parent = node.parent
    if parent is not None and parent.has_children_slot and parent.type != NODE_ROOT:
        containers.append(parent)
    grand = parent.parent if parent is not None else None
    if grand is not None and grand.has_children_slot and grand.type != NODE_ROOT:
        containers.append(grand)

    for container in containers:
        if container.id in ctx.checked_indicator_containers:
            continue
        ctx.checked_indicator_containers.add(container.id)

        for group in find_indicator_groups(container):
            target = next(
                (item for item in group.focus_items if item.node.id not in ctx.indicator_issued),
                None,
            )
            if target is None:
                continue
            ctx.indicator_issued.add(target.node.id)
            logger.debug(f"Color-only indicator row in {container.id}: "
                         f"{len(group.items)} items, flagged {target.node.id}")
            ctx.issues.append(AccessibilityIssue.for_node(
                target.node,
                check_type=AccessibilityCheckType.COLOR_INDEPENDENCE,
                severity=AccessibilitySeverity.WARNING,
                message=get_message("indicator.message", ctx.locale),
                suggestion=get_message("indicator.suggestion", ctx.locale),
            ))
