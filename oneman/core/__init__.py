"""Core module for the oneman application."""

from .types import FirestoreDocument, GroupKind

__all__ = ["FirestoreDocument", "GroupKind"]
