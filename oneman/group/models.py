"""Data models for the group blueprint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypedDict

from oneman.core.types import FirestoreDocument, GroupKind

if TYPE_CHECKING:
    from oneman.inventory.models import LedgerEntry


class Group(FirestoreDocument, total=False):
    """A site or store document in Firestore."""

    name: str
    location: str
    photoURL: str | None
    adminId: str
    members: list[str]
    materials: list[LedgerEntry]
    selectedCategory: str | None
    selectedCompanies: list[str]
    lastActivity: str

    # Calculated fields
    kind: GroupKind
    memberCount: int


class GroupSummary(TypedDict, total=False):
    """A group as listed on the home page and the transfer picker."""

    id: str
    kind: GroupKind
    name: str
    location: str
    photoURL: str | None
    memberCount: int
    createdAt: Any
