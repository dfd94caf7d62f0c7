"""
Shared Design Document Reading Utilities

This module provides utilities for reading design documents from JSON.
Two shapes are understood:
- Plugin-style exports, where every node carries ``absoluteTransform``,
  ``width`` and ``height`` directly
- REST API file responses (``{"document": {...}}``), where pages are
  ``CANVAS`` nodes, the root is ``DOCUMENT`` and geometry comes from
  ``relativeTransform``/``size``/``absoluteBoundingBox``

Malformed node properties are treated as absent so one odd node never
prevents a document from loading.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.document_provider import DesignDocument
from core.document_tree import (
    Color, Paint, VisualNode, Transform, IDENTITY_TRANSFORM,
    translation_transform, multiply_transforms,
    NODE_PAGE, NODE_ROOT, NODE_GROUP, NODE_BOOLEAN_OPERATION,
)


logger = logging.getLogger(__name__)

# REST API type names mapped onto the model's types
TYPE_ALIASES = {
    "DOCUMENT": NODE_ROOT,
    "CANVAS": NODE_PAGE,
}

# Types without their own coordinate space: children are positioned
# relative to the nearest enclosing frame
PASS_THROUGH_TYPES = {NODE_GROUP, NODE_BOOLEAN_OPERATION}


class DocumentLoadError(Exception):
    """Raised when a document cannot be read or has no recognizable structure."""
    pass


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


class DocumentReader:
    """
    Reads design documents from JSON files or already-parsed dictionaries.

    Provides methods to:
    - Validate a document file before loading
    - Load a file into a DesignDocument provider
    - Convert raw node dictionaries into VisualNode trees
    """

    def __init__(self):
        """Initialize the document reader."""
        self.logger = logging.getLogger(__name__)
        self.skipped_nodes = 0

    def validate_document_file(self, file_path: str) -> Dict[str, Any]:
        """
        Validate that a path points to a readable JSON document.

        Returns:
            Dictionary with validation results:
            {
                'valid': bool,
                'error': str (if invalid),
                'path': str (if valid)
            }
        """
        path = Path(file_path)
        if not path.exists():
            return {'valid': False, 'error': 'File does not exist'}
        if not path.is_file():
            return {'valid': False, 'error': 'Path is not a file'}
        if path.suffix.lower() != '.json':
            return {'valid': False, 'error': 'Document must be a .json export'}
        return {'valid': True, 'path': str(path)}

    def load_file(self, file_path: str) -> DesignDocument:
        """
        Load a document from a JSON file.

        Raises:
            DocumentLoadError: If the file is missing, unreadable or not a document
        """
        validation = self.validate_document_file(file_path)
        if not validation['valid']:
            raise DocumentLoadError(f"{file_path}: {validation['error']}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(f"Could not read {file_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise DocumentLoadError(f"Invalid JSON in {file_path}: {e}") from e

        fallback_name = Path(file_path).stem
        return self.load_dict(data, fallback_name=fallback_name)

    def load_dict(self, data: Any, fallback_name: str = "") -> DesignDocument:
        """
        Build a DesignDocument from parsed JSON.

        Raises:
            DocumentLoadError: If the data has no recognizable document structure
        """
        if not isinstance(data, dict):
            raise DocumentLoadError("Document JSON must be an object")

        self.skipped_nodes = 0
        current_page_id = None
        selection_ids: List[str] = []
        name = fallback_name

        raw_root = data
        if isinstance(data.get('document'), dict):
            raw_root = data['document']
            if isinstance(data.get('name'), str):
                name = data['name']
            if isinstance(data.get('currentPageId'), str):
                current_page_id = data['currentPageId']
            if isinstance(data.get('selection'), list):
                selection_ids = [s for s in data['selection'] if isinstance(s, str)]

        raw_type = raw_root.get('type') if isinstance(raw_root.get('type'), str) else ""
        raw_type = TYPE_ALIASES.get(raw_type, raw_type)
        if raw_type == NODE_PAGE:
            # A lone page export: give it a synthetic root to live under
            raw_root = {'id': '0:0', 'type': NODE_ROOT, 'name': name, 'children': [raw_root]}
        elif raw_type != NODE_ROOT:
            raise DocumentLoadError(f"Unrecognized document root type: {raw_root.get('type')!r}")

        root = self.parse_node(raw_root)
        if root is None:
            raise DocumentLoadError("Document root is missing an id")

        if self.skipped_nodes:
            self.logger.warning(f"Skipped {self.skipped_nodes} malformed nodes while loading document")

        document = DesignDocument(root, name=name or root.name,
                                  current_page_id=current_page_id,
                                  selection_ids=selection_ids)
        self.logger.info(f"Loaded document '{document.name}': "
                         f"{len(document.pages)} pages, {document.node_count()} nodes")
        return document

    def parse_node(self, raw: Any, parent_base: Transform = IDENTITY_TRANSFORM) -> Optional[VisualNode]:
        """Convert one raw node dictionary (and its subtree) to a VisualNode"""
        if not isinstance(raw, dict):
            self.skipped_nodes += 1
            return None

        node_id = raw.get('id')
        if isinstance(node_id, int) and not isinstance(node_id, bool):
            node_id = str(node_id)
        if not isinstance(node_id, str) or not node_id:
            self.logger.debug(f"Skipping node without id: {raw.get('name')!r}")
            self.skipped_nodes += 1
            return None

        raw_type = raw.get('type') if isinstance(raw.get('type'), str) else ""
        node_type = TYPE_ALIASES.get(raw_type, raw_type)
        name = raw.get('name') if isinstance(raw.get('name'), str) else ""
        visible = raw.get('visible') if isinstance(raw.get('visible'), bool) else None

        width, height = self._parse_size(raw)
        transform = None
        if node_type not in (NODE_PAGE, NODE_ROOT):
            transform = self._parse_transform(raw, parent_base)

        characters = raw.get('characters') if isinstance(raw.get('characters'), str) else None

        node = VisualNode(
            id=node_id,
            type=node_type,
            name=name,
            visible=visible,
            width=width,
            height=height,
            absolute_transform=transform,
            fills=self._parse_paints(raw.get('fills')),
            strokes=self._parse_paints(raw.get('strokes')),
            stroke_weight=_number(raw.get('strokeWeight')),
            effects=self._parse_effects(raw.get('effects')),
            characters=characters,
        )

        raw_children = raw.get('children')
        if isinstance(raw_children, list):
            if node_type in PASS_THROUGH_TYPES:
                child_base = parent_base
            else:
                child_base = transform or parent_base
            node.children = []
            for raw_child in raw_children:
                child = self.parse_node(raw_child, child_base)
                if child is not None:
                    node.append_child(child)

        return node

    # =========================================================================
    # PROPERTY PARSING
    # =========================================================================

    def _parse_size(self, raw: Dict[str, Any]):
        width = _number(raw.get('width'))
        height = _number(raw.get('height'))
        if width is not None and height is not None:
            return width, height

        size = raw.get('size')
        if isinstance(size, dict):
            width = _number(size.get('x'))
            height = _number(size.get('y'))
            if width is not None and height is not None:
                return width, height

        bbox = raw.get('absoluteBoundingBox')
        if isinstance(bbox, dict):
            width = _number(bbox.get('width'))
            height = _number(bbox.get('height'))
            if width is not None and height is not None:
                return width, height

        return None, None

    def _parse_matrix(self, value: Any) -> Optional[Transform]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            return None
        rows = []
        for row in value:
            if not isinstance(row, (list, tuple)) or len(row) != 3:
                return None
            numbers = [_number(v) for v in row]
            if any(n is None for n in numbers):
                return None
            rows.append(tuple(numbers))
        return (rows[0], rows[1])

    def _parse_transform(self, raw: Dict[str, Any], parent_base: Transform) -> Optional[Transform]:
        absolute = self._parse_matrix(raw.get('absoluteTransform'))
        if absolute is not None:
            return absolute

        relative = self._parse_matrix(raw.get('relativeTransform'))
        if relative is not None:
            return multiply_transforms(parent_base, relative)

        bbox = raw.get('absoluteBoundingBox')
        if isinstance(bbox, dict):
            x = _number(bbox.get('x'))
            y = _number(bbox.get('y'))
            if x is not None and y is not None:
                return translation_transform(x, y)

        return None

    def _parse_color(self, value: Any) -> Optional[Color]:
        if not isinstance(value, dict):
            return None
        channels = [_number(value.get(k)) for k in ('r', 'g', 'b')]
        if any(c is None for c in channels):
            return None
        return Color(*channels)

    def _parse_paints(self, value: Any) -> Optional[List[Paint]]:
        if not isinstance(value, list):
            return None
        paints = []
        for raw_paint in value:
            if not isinstance(raw_paint, dict) or not isinstance(raw_paint.get('type'), str):
                continue
            visible = raw_paint.get('visible')
            paints.append(Paint(
                type=raw_paint['type'],
                color=self._parse_color(raw_paint.get('color')),
                visible=visible if isinstance(visible, bool) else None,
            ))
        return paints

    def _parse_effects(self, value: Any) -> Optional[List[Dict[str, Any]]]:
        if not isinstance(value, list):
            return None
        return [e for e in value if isinstance(e, dict)]


def load_document(file_path: str) -> DesignDocument:
    """Convenience wrapper around DocumentReader().load_file"""
    return DocumentReader().load_file(file_path)


__all__ = ['DocumentReader', 'DocumentLoadError', 'load_document']
