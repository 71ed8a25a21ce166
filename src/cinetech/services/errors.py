# COMPONENT: CATALOG ERROR TAXONOMY
# REQUIREMENTS SATISFIED: typed, synchronous error reporting for store, codec and ingest
"""
src/cinetech/services/errors.py

Exception types raised by the catalog services.

Every error raised here leaves the catalog in its last valid state. The
HTTP layer maps each type to a status code; other callers inspect the
attributes directly.
"""
from typing import Dict, List, Optional


class CatalogError(Exception):
    """Base class for all catalog failures."""


class ValidationError(CatalogError):
    """Malformed or out-of-range input to a create/update."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(CatalogError):
    def __init__(self, kind: str, id_: int):
        super().__init__(f"{kind} {id_} not found")
        self.kind = kind
        self.id = id_


class ConflictError(CatalogError):
    """Delete blocked by films that still reference the director."""

    def __init__(self, message: str, dependents: int):
        super().__init__(message)
        self.dependents = dependents


class ImportFormatError(CatalogError):
    """Snapshot document is missing its required top-level keys."""


class ExternalServiceError(CatalogError):
    """Network failure, timeout or non-success answer from the metadata service."""
