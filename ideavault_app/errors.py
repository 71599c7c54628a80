"""Exceptions raised by IdeaVault operations."""

from __future__ import annotations


class IdeaVaultError(RuntimeError):
    """Base class for errors surfaced to the CLI user."""


class NotFoundError(IdeaVaultError):
    """Raised when a referenced entity is absent from its collection."""


class ValidationError(IdeaVaultError):
    """Raised when user input cannot be turned into a valid value."""


class StorageError(IdeaVaultError):
    """Raised when a collection file cannot be read or written."""


class ParseError(IdeaVaultError):
    """Raised when stored JSON or an edited document is malformed."""


class EditorError(IdeaVaultError):
    """Raised when the external editor is missing or exits non-zero."""


__all__ = [
    "IdeaVaultError",
    "NotFoundError",
    "ValidationError",
    "StorageError",
    "ParseError",
    "EditorError",
]
