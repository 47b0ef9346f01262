"""Data models for the inventory blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, TypedDict

from oneman.core.constants import GROUP_COLLECTIONS
from oneman.core.types import GroupKind
from oneman.errors import ValidationError


class _LedgerEntryBase(TypedDict):
    id: str
    name: str
    unit: str
    amount: float


class LedgerEntry(_LedgerEntryBase, total=False):
    """One material held by a site or store."""

    location: str


@dataclass
class GroupAddress:
    """Identifies a site or store document."""

    kind: GroupKind
    group_id: str

    @property
    def source_key(self) -> str:
        """Return the ``<collection>_<id>`` name used for this group in logs."""
        return f"{GROUP_COLLECTIONS.get(self.kind, self.kind)}_{self.group_id}"


@dataclass
class TransferRequest:
    """A request to move a material from one group's ledger to another's."""

    source: GroupAddress
    destination: GroupAddress
    name: str
    unit: str
    amount: Any
    # Group whose message log receives the receipt; the destination by default.
    log_to: Optional[GroupAddress] = None

    def validate(self) -> None:
        """Validate the transfer request for obvious errors."""
        if not self.name or not self.unit:
            raise ValidationError("Material name and unit are required.")
        if (
            self.source.kind == self.destination.kind
            and self.source.group_id == self.destination.group_id
        ):
            raise ValidationError("Source and destination must be different.")
        for address in (self.source, self.destination):
            if address.kind not in GROUP_COLLECTIONS:
                raise ValidationError(f"Unknown group type: {address.kind}")
            if not address.group_id:
                raise ValidationError("A group id is required.")


@dataclass
class TransferResult:
    """Outcome of a committed transfer."""

    source_materials: list[LedgerEntry]
    destination_materials: list[LedgerEntry]
    message_id: str
    amount: float
