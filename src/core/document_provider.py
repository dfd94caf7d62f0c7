"""
Document Provider - Host interface for design documents

Defines the read-mostly interface the checkers use to reach a document
(pages, current page, selection, id lookup) and the single write they
perform: replacing the selection and focusing the viewport on a node.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from core.document_tree import VisualNode, NODE_PAGE, NODE_ROOT


logger = logging.getLogger(__name__)


class DocumentProvider(ABC):
    """Interface implemented by anything that can serve a document tree."""

    @property
    @abstractmethod
    def root(self) -> VisualNode:
        pass

    @property
    @abstractmethod
    def current_page(self) -> Optional[VisualNode]:
        pass

    @property
    @abstractmethod
    def selection(self) -> List[VisualNode]:
        pass

    @abstractmethod
    def get_node_by_id(self, node_id: str) -> Optional[VisualNode]:
        pass

    @abstractmethod
    def set_selection(self, nodes: Sequence[VisualNode]) -> None:
        pass

    @abstractmethod
    def scroll_and_zoom_into_view(self, nodes: Sequence[VisualNode]) -> None:
        pass

    def close(self) -> None:
        """End the interactive session (no-op by default)"""
        pass

    @property
    def pages(self) -> List[VisualNode]:
        return [n for n in self.root.child_nodes() if n.type == NODE_PAGE]


class DesignDocument(DocumentProvider):
    """
    In-memory document provider.

    Holds the ROOT node (which owns the whole tree), an id index built once at
    construction, the current page, the selection and the last viewport focus.
    """

    def __init__(self, root: VisualNode, name: str = "",
                 current_page_id: Optional[str] = None,
                 selection_ids: Optional[Sequence[str]] = None):
        if root.type != NODE_ROOT:
            raise ValueError(f"Document root must be a {NODE_ROOT} node, got {root.type}")

        self._root = root
        self.name = name or root.name
        self._index: Dict[str, VisualNode] = {}
        for node in root.walk():
            if node.id in self._index:
                logger.debug(f"Duplicate node id in document: {node.id}")
                continue
            self._index[node.id] = node

        self._current_page: Optional[VisualNode] = None
        if current_page_id:
            page = self._index.get(current_page_id)
            if page is not None and page.type == NODE_PAGE:
                self._current_page = page
        if self._current_page is None and self.pages:
            self._current_page = self.pages[0]

        self._selection: List[VisualNode] = []
        for node_id in selection_ids or []:
            node = self._index.get(node_id)
            if node is not None:
                self._selection.append(node)

        self.viewport_focus: List[VisualNode] = []
        self.closed = False

    @property
    def root(self) -> VisualNode:
        return self._root

    @property
    def current_page(self) -> Optional[VisualNode]:
        return self._current_page

    def set_current_page(self, page_id: str) -> bool:
        page = self._index.get(page_id)
        if page is None or page.type != NODE_PAGE:
            return False
        self._current_page = page
        return True

    @property
    def selection(self) -> List[VisualNode]:
        return list(self._selection)

    def get_node_by_id(self, node_id: str) -> Optional[VisualNode]:
        if not isinstance(node_id, str):
            return None
        return self._index.get(node_id)

    def set_selection(self, nodes: Sequence[VisualNode]) -> None:
        self._selection = list(nodes)

    def scroll_and_zoom_into_view(self, nodes: Sequence[VisualNode]) -> None:
        self.viewport_focus = list(nodes)
        logger.debug(f"Viewport focused on: {[n.id for n in self.viewport_focus]}")

    def close(self) -> None:
        self.closed = True

    def node_count(self) -> int:
        return len(self._index)


__all__ = ['DocumentProvider', 'DesignDocument']
