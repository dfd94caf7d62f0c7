"""
Document Tree - Visual node model for design documents

Data classes for the read-only node tree the checkers inspect. The tree is
owned top-down (parent owns children); each node keeps only a weak,
lookup-only reference to its parent for ancestor walks.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple


# Node types consumed by the checkers
NODE_TEXT = "TEXT"
NODE_RECTANGLE = "RECTANGLE"
NODE_ELLIPSE = "ELLIPSE"
NODE_POLYGON = "POLYGON"
NODE_STAR = "STAR"
NODE_VECTOR = "VECTOR"
NODE_LINE = "LINE"
NODE_BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
NODE_FRAME = "FRAME"
NODE_GROUP = "GROUP"
NODE_COMPONENT = "COMPONENT"
NODE_INSTANCE = "INSTANCE"
NODE_PAGE = "PAGE"
NODE_ROOT = "ROOT"

PAINT_SOLID = "SOLID"

# 2x3 affine matrix: ((a, b, tx), (c, d, ty))
Transform = Tuple[Tuple[float, float, float], Tuple[float, float, float]]

IDENTITY_TRANSFORM: Transform = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


class Color(NamedTuple):
    """RGB color with channels in [0, 1]"""
    r: float
    g: float
    b: float


@dataclass(frozen=True)
class Paint:
    """A single fill or stroke paint. Only SOLID paints carry a color."""
    type: str
    color: Optional[Color] = None
    visible: Optional[bool] = None  # None means visible

    @property
    def is_solid(self) -> bool:
        """True for a visible SOLID paint with a color"""
        return (
            self.type == PAINT_SOLID
            and self.color is not None
            and (self.visible is None or self.visible is True)
        )


WHITE_PAINT = Paint(type=PAINT_SOLID, color=Color(1.0, 1.0, 1.0))


@dataclass(eq=False)
class VisualNode:
    """
    A node in a design document.

    Optional fields are None when the node type does not carry them
    (e.g. PAGE has no geometry, TEXT has no children). ``children`` is None
    for types that cannot hold children and a list for container types.
    """
    id: str
    type: str
    name: str = ""
    visible: Optional[bool] = None
    children: Optional[List['VisualNode']] = None
    width: Optional[float] = None
    height: Optional[float] = None
    absolute_transform: Optional[Transform] = None
    fills: Optional[List[Paint]] = None
    strokes: Optional[List[Paint]] = None
    stroke_weight: Optional[float] = None
    effects: Optional[List[Dict[str, Any]]] = None
    characters: Optional[str] = None
    _parent_ref: Optional[weakref.ReferenceType] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.children is not None:
            for child in self.children:
                child._parent_ref = weakref.ref(self)

    def __repr__(self) -> str:
        return f"VisualNode(id={self.id!r}, type={self.type!r}, name={self.name!r})"

    @property
    def parent(self) -> Optional['VisualNode']:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def has_children_slot(self) -> bool:
        """True if the node type can hold children"""
        return self.children is not None

    def append_child(self, child: 'VisualNode') -> 'VisualNode':
        if self.children is None:
            self.children = []
        self.children.append(child)
        child._parent_ref = weakref.ref(self)
        return child

    def child_nodes(self) -> List['VisualNode']:
        return list(self.children) if self.children else []

    def fill_paints(self) -> List[Paint]:
        return list(self.fills) if self.fills else []

    def stroke_paints(self) -> List[Paint]:
        return list(self.strokes) if self.strokes else []

    def effect_list(self) -> List[Dict[str, Any]]:
        return list(self.effects) if self.effects else []

    def text(self) -> str:
        """Text content for TEXT nodes, empty string otherwise"""
        if self.type != NODE_TEXT:
            return ""
        return self.characters or ""

    def iter_ancestors(self, include_self: bool = False) -> Iterator['VisualNode']:
        """Walk the parent chain outward"""
        node = self if include_self else self.parent
        while node is not None:
            yield node
            node = node.parent

    def page_name(self) -> str:
        """Name of the page containing this node (inclusive), or empty string"""
        for node in self.iter_ancestors(include_self=True):
            if node.type == NODE_PAGE:
                return node.name
        return ""

    def walk(self) -> Iterator['VisualNode']:
        """Pre-order walk of this subtree"""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes()))


def translation_transform(x: float, y: float) -> Transform:
    return ((1.0, 0.0, float(x)), (0.0, 1.0, float(y)))


def multiply_transforms(outer: Transform, inner: Transform) -> Transform:
    """Compose two 2x3 affine matrices (outer applied after inner)"""
    (a1, b1, tx1), (c1, d1, ty1) = outer
    (a2, b2, tx2), (c2, d2, ty2) = inner
    return (
        (a1 * a2 + b1 * c2, a1 * b2 + b1 * d2, a1 * tx2 + b1 * ty2 + tx1),
        (c1 * a2 + d1 * c2, c1 * b2 + d1 * d2, c1 * tx2 + d1 * ty2 + ty1),
    )


__all__ = [
    'Color', 'Paint', 'VisualNode', 'Transform', 'IDENTITY_TRANSFORM', 'WHITE_PAINT',
    'translation_transform', 'multiply_transforms',
    'NODE_TEXT', 'NODE_RECTANGLE', 'NODE_ELLIPSE', 'NODE_POLYGON', 'NODE_STAR',
    'NODE_VECTOR', 'NODE_LINE', 'NODE_BOOLEAN_OPERATION', 'NODE_FRAME', 'NODE_GROUP',
    'NODE_COMPONENT', 'NODE_INSTANCE', 'NODE_PAGE', 'NODE_ROOT', 'PAINT_SOLID',
]
