"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for the data layer.
These protocols enable dependency injection for payload retrieval,
making the store testable without real network access.

Protocols defined:
- DataSource: Interface for anything that can produce one JSON document
"""

from typing import Protocol, Any


class DataSource(Protocol):
    """Protocol defining the interface for content payload sources.

    Implementations should:
    - Return the decoded JSON document (list, dict, or scalar)
    - Raise LoadError on transport failures or non-success responses
    - Raise ParseError when the body is not valid JSON
    """

    def fetch_json(self) -> Any:
        """Fetch and decode one JSON document.

        Returns:
            The decoded JSON value.

        Raises:
            LoadError: If the document could not be retrieved.
            ParseError: If the document is not valid JSON.
        """
        ...

    def describe(self) -> str:
        """Return a short human-readable description used in log messages."""
        ...
