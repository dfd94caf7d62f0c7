"""
Design Accessibility Checker - Core Components

Document model, document providers and loaders, the tool registry and the
shared UI base.
"""

__version__ = "1.0.0"

from core.document_tree import VisualNode, Paint, Color
from core.document_provider import DocumentProvider, DesignDocument
from core.document_reader import DocumentReader, DocumentLoadError, load_document

__all__ = [
    'VisualNode',
    'Paint',
    'Color',
    'DocumentProvider',
    'DesignDocument',
    'DocumentReader',
    'DocumentLoadError',
    'load_document',
]
