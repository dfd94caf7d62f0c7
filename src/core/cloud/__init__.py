"""
Core Cloud Module - Remote document sources

Provides the Figma REST client used to fetch documents without a manual
JSON export.
"""

from core.cloud.figma_client import FigmaFileClient, TOKEN_ENV_VAR

__all__ = [
    'FigmaFileClient',
    'TOKEN_ENV_VAR',
]
