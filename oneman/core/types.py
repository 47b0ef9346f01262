"""Core data types for the oneman application."""

from typing import Any, Literal, TypedDict

GroupKind = Literal["site", "store"]


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    path: str
    updatedAt: Any
