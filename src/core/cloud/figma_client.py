"""
Figma File Client - REST API document retrieval

Fetches design files from the Figma REST API so they can be checked without
exporting JSON by hand. Requests return (data, error) tuples; only
load_document raises, so callers that need a document get one or a
DocumentLoadError.
"""

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests

from core.document_provider import DesignDocument
from core.document_reader import DocumentReader, DocumentLoadError


TOKEN_ENV_VAR = "FIGMA_TOKEN"


class FigmaFileClient:
    """
    Minimal Figma REST client for reading files.

    The personal access token is taken from the constructor or, when not
    given, from the FIGMA_TOKEN environment variable.
    """

    API_BASE = "https://api.figma.com/v1"
    REQUEST_TIMEOUT = 30

    def __init__(self, token: Optional[str] = None, api_base: Optional[str] = None):
        self.token = token or os.environ.get(TOKEN_ENV_VAR)
        self.api_base = (api_base or self.API_BASE).rstrip('/')
        self.logger = logging.getLogger(__name__)

    def _api_request(self, endpoint: str,
                     params: Optional[Dict[str, Any]] = None) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Make an authenticated GET request.

        Returns:
            Tuple of (response_json, error_message)
        """
        if not self.token:
            return None, f"No access token (set {TOKEN_ENV_VAR} or pass a token)"

        url = f"{self.api_base}{endpoint}"
        headers = {"X-Figma-Token": self.token}

        try:
            response = requests.get(url, headers=headers, params=params, timeout=self.REQUEST_TIMEOUT)

            if response.status_code in (401, 403):
                return None, "Access denied. Check the token and file permissions."
            if response.status_code == 404:
                return None, "File not found"
            if response.status_code >= 400:
                return None, f"API error {response.status_code}: {response.text}"

            try:
                return response.json(), None
            except (json.JSONDecodeError, ValueError) as e:
                return None, f"Invalid API response: {e}"

        except requests.exceptions.Timeout:
            return None, "Connection timed out"
        except requests.RequestException as e:
            return None, f"Request failed: {e}"

    def fetch_file(self, file_key: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Fetch the full file JSON, including transforms and sizes.

        Args:
            file_key: The key from the file URL (figma.com/file/<key>/...)
        """
        if not file_key or not file_key.strip():
            return None, "File key is empty"
        self.logger.info(f"Fetching file {file_key}")
        return self._api_request(f"/files/{quote(file_key.strip())}", params={"geometry": "paths"})

    def load_document(self, file_key: str) -> DesignDocument:
        """
        Fetch a file and build a document provider from it.

        Raises:
            DocumentLoadError: If the request fails or the response is not a document
        """
        data, error = self.fetch_file(file_key)
        if error:
            raise DocumentLoadError(f"Could not fetch file {file_key}: {error}")
        return DocumentReader().load_dict(data, fallback_name=file_key)


__all__ = ['FigmaFileClient', 'TOKEN_ENV_VAR']
