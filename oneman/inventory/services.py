"""Service layer for recording and moving materials between groups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from oneman.chat.models import MaterialData, MaterialMessage, Sender
from oneman.chat.services import MessageLog
from oneman.core.access import require_member
from oneman.errors import MaterialNotFound, NotFoundError, RemoteOperationFailed
from oneman.group.services.group_service import GroupService, snapshot_to_group
from oneman.utils import group_ref

from . import ledger
from .models import TransferResult

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.transaction import Transaction

    from oneman.group.models import Group
    from oneman.user.models import UserSession

    from .models import LedgerEntry, TransferRequest


def _location_label(group: Group) -> str:
    return group.get("name") or group.get("location") or ""


def _commit_ledger_change(
    db: Client,
    kind: str,
    group_id: str,
    materials: list[LedgerEntry],
    message: MaterialMessage,
) -> str:
    """Write the new ledger and its material message in one batch."""
    batch = db.batch()
    batch.update(
        group_ref(db, kind, group_id),
        {"materials": materials, "lastActivity": message.material.name},
    )
    ref = MessageLog.stage(batch, db, kind, group_id, message)
    try:
        batch.commit()
    except GoogleAPIError as e:
        current_app.logger.error(f"Error updating materials of {group_id}: {e}")
        raise RemoteOperationFailed("Failed to update materials.") from e
    return ref.id


class InventoryService:
    """Service class for material ledger operations."""

    @staticmethod
    def add_material(  # noqa: PLR0913
        db: Client,
        user: UserSession,
        kind: str,
        group_id: str,
        name: str,
        unit: str,
        amount: Any,
    ) -> list[LedgerEntry]:
        """Add a quantity of material to a group and log it."""
        group = GroupService.get_group_for_member(db, user, kind, group_id)
        quantity = ledger.parse_amount(amount)
        materials = ledger.add(
            group["materials"], name, unit, quantity, _location_label(group)
        )
        message = MaterialMessage(
            MaterialData(name=name, amount=quantity, unit=unit),
            Sender.from_session(user),
        )
        _commit_ledger_change(db, kind, group_id, materials, message)
        current_app.logger.info(
            f"{user.uid} added {quantity} {unit} of {name} to {kind} {group_id}"
        )
        return materials

    @staticmethod
    def remove_material(  # noqa: PLR0913
        db: Client,
        user: UserSession,
        kind: str,
        group_id: str,
        entry_id: str,
        amount: Any,
    ) -> list[LedgerEntry]:
        """Remove a quantity from a ledger entry and log it with a negative amount."""
        group = GroupService.get_group_for_member(db, user, kind, group_id)
        quantity = ledger.parse_amount(amount)
        entry = next(
            (e for e in group["materials"] if e.get("id") == entry_id), None
        )
        if entry is None:
            raise MaterialNotFound()
        materials = ledger.remove(group["materials"], entry_id, quantity)
        message = MaterialMessage(
            MaterialData(name=entry["name"], amount=-quantity, unit=entry["unit"]),
            Sender.from_session(user),
        )
        _commit_ledger_change(db, kind, group_id, materials, message)
        current_app.logger.info(
            f"{user.uid} removed {quantity} {entry['unit']} of {entry['name']} "
            f"from {kind} {group_id}"
        )
        return materials

    @staticmethod
    def _apply_transfer(
        transaction: Transaction,
        db: Client,
        user: UserSession,
        request: TransferRequest,
        quantity: float,
    ) -> TransferResult:
        """Read both groups, move the material and stage the receipt."""
        source_ref = group_ref(db, request.source.kind, request.source.group_id)
        dest_ref = group_ref(
            db, request.destination.kind, request.destination.group_id
        )
        groups: list[Group] = []
        for address, ref in (
            (request.source, source_ref),
            (request.destination, dest_ref),
        ):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Group not found.")
            group = snapshot_to_group(snapshot, address.kind)
            require_member(group, user)
            groups.append(group)
        source, destination = groups

        source_materials, dest_materials = ledger.transfer(
            source["materials"],
            destination["materials"],
            request.name,
            request.unit,
            quantity,
            _location_label(destination),
        )
        transaction.update(source_ref, {"materials": source_materials})
        transaction.update(dest_ref, {"materials": dest_materials})

        # The receipt names the other side of the move.
        log_to = request.log_to or request.destination
        if log_to == request.source:
            counterpart, other, signed = request.destination, destination, -quantity
        else:
            counterpart, other, signed = request.source, source, quantity
        message = MaterialMessage(
            MaterialData(
                name=request.name,
                amount=signed,
                unit=request.unit,
                source=_location_label(other),
                source_type=counterpart.kind,
                source_id=counterpart.group_id,
            ),
            Sender.from_session(user),
        )
        ref = MessageLog.stage(
            transaction, db, log_to.kind, log_to.group_id, message
        )
        return TransferResult(
            source_materials=source_materials,
            destination_materials=dest_materials,
            message_id=ref.id,
            amount=quantity,
        )

    @staticmethod
    def transfer(
        db: Client, user: UserSession, request: TransferRequest
    ) -> TransferResult:
        """Move material between two groups atomically.

        Both ledgers and the receipt message are written in a single Firestore
        transaction, so a failure leaves neither group changed.
        """
        request.validate()
        quantity = ledger.parse_amount(request.amount)

        @firestore.transactional
        def run(transaction: Transaction) -> TransferResult:
            return InventoryService._apply_transfer(
                transaction, db, user, request, quantity
            )

        try:
            result = cast("TransferResult", run(db.transaction()))
        except GoogleAPIError as e:
            current_app.logger.error(f"Error transferring {request.name}: {e}")
            raise RemoteOperationFailed("Failed to transfer material.") from e

        current_app.logger.info(
            f"{user.uid} moved {quantity} {request.unit} of {request.name} from "
            f"{request.source.source_key} to {request.destination.source_key}"
        )
        return result

