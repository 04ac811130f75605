"""Catalog error taxonomy.

Repositories and the asset store raise these; the handlers registered in
``main.py`` turn them into ``{"message": ...}`` JSON responses.
"""
from typing import List, Optional

from fastapi import status


class CatalogError(Exception):
    """Base class for errors that map onto an HTTP response"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(CatalogError):
    """Missing or malformed input"""
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateNameError(CatalogError):
    """A category with the same name already exists"""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(CatalogError):
    """Uploaded file could not be written to the content directory"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
