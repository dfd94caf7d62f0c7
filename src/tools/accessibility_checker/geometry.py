"""
Accessibility Checker - Geometry utilities

Visibility through the ancestor chain and transform-aware bounding boxes.
Nodes without usable geometry simply yield None and drop out of the
geometry-dependent checks.
"""

import math
from typing import Optional

from core.document_tree import VisualNode, Transform
from tools.accessibility_checker.accessibility_types import Rect, NEARBY_MAX_DX, NEARBY_MAX_DY


def is_visible(node: VisualNode) -> bool:
    """False if the node or any ancestor is explicitly hidden"""
    for current in node.iter_ancestors(include_self=True):
        if current.visible is False:
            return False
    return True


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def transform_point(matrix: Transform, x: float, y: float):
    (a, b, tx), (c, d, ty) = matrix
    return a * x + b * y + tx, c * x + d * y + ty


def bounding_rect(node: Optional[VisualNode]) -> Optional[Rect]:
    """
    Document-space bounding box of a node.

    The four local corners are pushed through the absolute transform before
    taking min/max, so rotated and skewed nodes are bounded correctly.
    """
    if node is None or not is_number(node.width) or not is_number(node.height):
        return None
    matrix = node.absolute_transform
    if not matrix:
        return None

    w, h = node.width, node.height
    corners = [
        transform_point(matrix, 0, 0),
        transform_point(matrix, w, 0),
        transform_point(matrix, 0, h),
        transform_point(matrix, w, h),
    ]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    return Rect(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def nearby(a: VisualNode, b: VisualNode,
           max_dx: float = NEARBY_MAX_DX, max_dy: float = NEARBY_MAX_DY) -> bool:
    """True if both nodes have geometry and their centers are within the given deltas"""
    rect_a = bounding_rect(a)
    rect_b = bounding_rect(b)
    if rect_a is None or rect_b is None:
        return False
    return abs(rect_a.cx - rect_b.cx) <= max_dx and abs(rect_a.cy - rect_b.cy) <= max_dy
