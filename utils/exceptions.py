"""
Custom Exception Classes for the Content Browser

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""


class ContentBrowserError(Exception):
    """Base exception for all Content Browser application errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ContentBrowserError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Content Loading Errors
# =============================================================================

class LoadError(ContentBrowserError):
    """Raised when the content payload cannot be fetched (network failure or non-success status)."""
    pass


class ParseError(LoadError):
    """Raised when the payload is malformed or has an unexpected top-level shape."""
    pass


class SchemaError(ParseError):
    """Raised when a versioned payload does not match the supported schema."""
    pass
