"""Builders for small design trees used across the tests.

Parent links are weak references, so a test must keep the returned page,
root or DesignDocument alive while it inspects the nodes.
"""

from typing import Iterable, Optional, Sequence

from core.document_provider import DesignDocument
from core.document_tree import (
    Color,
    Paint,
    VisualNode,
    translation_transform,
    NODE_ELLIPSE,
    NODE_FRAME,
    NODE_PAGE,
    NODE_ROOT,
    NODE_TEXT,
)
from tools.accessibility_checker.accessibility_types import AnalysisContext

WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)
LIGHT_GRAY = (0.8, 0.8, 0.8)
DARK_GRAY = (0.2, 0.2, 0.2)


def solid(rgb: Sequence[float], visible: Optional[bool] = None) -> Paint:
    return Paint(type="SOLID", color=Color(*rgb), visible=visible)


def shape(node_id: str, x: float, y: float, w: float, h: float,
          fill: Optional[Sequence[float]] = LIGHT_GRAY, node_type: str = NODE_ELLIPSE,
          name: Optional[str] = None, **kwargs) -> VisualNode:
    return VisualNode(
        id=node_id,
        type=node_type,
        name=name if name is not None else node_id,
        width=w,
        height=h,
        absolute_transform=translation_transform(x, y),
        fills=[solid(fill)] if fill is not None else [],
        **kwargs,
    )


def text(node_id: str, characters: str, x: float = 0, y: float = 0, w: float = 100, h: float = 20,
         fill: Optional[Sequence[float]] = BLACK, name: Optional[str] = None, **kwargs) -> VisualNode:
    return VisualNode(
        id=node_id,
        type=NODE_TEXT,
        name=name if name is not None else characters,
        width=w,
        height=h,
        absolute_transform=translation_transform(x, y),
        fills=[solid(fill)] if fill is not None else [],
        characters=characters,
        **kwargs,
    )


def frame(node_id: str, children: Iterable[VisualNode] = (), x: float = 0, y: float = 0,
          w: float = 400, h: float = 300, fill: Optional[Sequence[float]] = None,
          name: Optional[str] = None, node_type: str = NODE_FRAME, **kwargs) -> VisualNode:
    return VisualNode(
        id=node_id,
        type=node_type,
        name=name if name is not None else node_id,
        width=w,
        height=h,
        absolute_transform=translation_transform(x, y),
        fills=[solid(fill)] if fill is not None else [],
        children=list(children),
        **kwargs,
    )


def page(node_id: str, children: Iterable[VisualNode] = (), name: Optional[str] = None) -> VisualNode:
    return VisualNode(id=node_id, type=NODE_PAGE, name=name if name is not None else node_id,
                      children=list(children))


def document(*pages: VisualNode, **kwargs) -> DesignDocument:
    root = VisualNode(id="0:0", type=NODE_ROOT, name="Document", children=list(pages))
    return DesignDocument(root, **kwargs)


def context(min_contrast: float = 3.0, locale: str = "en", **rules) -> AnalysisContext:
    return AnalysisContext(rules=dict(rules), min_contrast=min_contrast, locale=locale)


def indicator_row(prefix: str = "dot", colors: Sequence[Sequence[float]] = (LIGHT_GRAY, DARK_GRAY, LIGHT_GRAY),
                  size: float = 8, gap: float = 8, x: float = 0, y: float = 0) -> list:
    """A horizontal row of same-sized dots, one per color"""
    return [
        shape(f"{prefix}{i}", x + i * (size + gap), y, size, size, fill=color)
        for i, color in enumerate(colors)
    ]
