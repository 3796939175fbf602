# docindex/core/__init__.py
"""
docindex core - shared building blocks.

Public API:
    - Document: Tagged union of documentation classifications
    - parse_document: Build a Document from a raw adapter mapping
    - DocIndexPaths: Central path management
    - load_config / load_yaml: YAML configuration loading
    - create_async_api_client / APIError: HTTP client factory and errors
"""

from docindex.core.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_config,
    load_yaml,
    validate_config,
)
from docindex.core.document import (
    Document,
    DocumentType,
    normalize_document_type,
    parse_document,
)
from docindex.core.http import APIError, create_async_api_client
from docindex.core.paths import DocIndexPaths

__all__ = [
    "APIError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "DocIndexPaths",
    "Document",
    "DocumentType",
    "create_async_api_client",
    "load_config",
    "load_yaml",
    "normalize_document_type",
    "parse_document",
    "validate_config",
]
