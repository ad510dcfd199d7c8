"""
Content Payload Sources

This module provides the concrete data sources the content store can load from:
an HTTP endpoint (the normal case), a local JSON file, and an in-memory document.
"""

import json
from pathlib import Path
from typing import Any, Optional, Dict

import requests

from config import settings
from utils.exceptions import LoadError, ParseError
from utils.logger import get_logger

logger = get_logger(__name__)


class HttpDataSource:
    """Fetches the payload with a single HTTP GET."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None,
                 headers: Optional[Dict[str, str]] = None):
        """
        Initialize the HTTP data source.

        Args:
            url: Endpoint to fetch, defaults to settings.CONTENT_API_URL
            timeout: Request timeout in seconds, defaults to settings.REQUEST_TIMEOUT
            headers: Request headers, defaults to settings.REQUEST_HEADERS
        """
        self.url = url or settings.CONTENT_API_URL
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.headers = headers if headers is not None else settings.REQUEST_HEADERS

    def fetch_json(self) -> Any:
        """
        Fetch and decode the JSON document.

        Returns:
            Any: The decoded JSON value.

        Raises:
            LoadError: On connection errors, timeouts, or non-success status codes.
            ParseError: If the response body is not valid JSON.
        """
        try:
            response = requests.get(self.url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise LoadError(f"Request to {self.url} failed: {e}") from e

        if not response.ok:
            raise LoadError(f"HTTP error! status: {response.status_code} for {self.url}")

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Response from {self.url} is not valid JSON: {e}") from e

    def describe(self) -> str:
        return self.url


class FileDataSource:
    """Reads the payload from a local JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def fetch_json(self) -> Any:
        try:
            text = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{self.path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise LoadError(f"Could not read {self.path}: {e}") from e

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"{self.path} is not valid JSON: {e}") from e

    def describe(self) -> str:
        return str(self.path)


class StaticDataSource:
    """Serves an already-decoded document, e.g. one handed over by an embedding host."""

    def __init__(self, document: Any):
        self.document = document

    def fetch_json(self) -> Any:
        return self.document

    def describe(self) -> str:
        return "static document"


def source_from_location(location: Optional[str]):
    """
    Build a data source from a URL or a file path.

    Args:
        location: An http(s) URL, a path to a JSON file, or None for the configured endpoint

    Returns:
        A DataSource implementation
    """
    if not location or location.startswith(("http://", "https://")):
        return HttpDataSource(location)
    return FileDataSource(location)
