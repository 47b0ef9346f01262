"""Service layer for the per-group message log."""

from __future__ import annotations

import itertools
import logging
import time
import uuid
from typing import TYPE_CHECKING, Any, Callable

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from oneman.core.access import require_admin, require_member
from oneman.errors import (
    InvalidMessage,
    NotFoundError,
    RemoteOperationFailed,
    ValidationError,
)
from oneman.utils import messages_ref, utc_now

from .models import (
    ImageMessage,
    Message,
    Sender,
    TextMessage,
    message_from_firestore,
    to_firestore,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

    from oneman.group.models import Group
    from oneman.user.models import UserSession

# Snapshot listeners run on a background thread without an app context.
logger = logging.getLogger(__name__)

_sequence = itertools.count()


def new_message_id() -> str:
    """Return a message document id that sorts in creation order.

    Ids lead with the wall clock in nanoseconds, then a process-wide counter,
    so messages sharing a timestamp read back in the order they were sent.
    """
    counter = next(_sequence) % 1_000_000
    return f"{time.time_ns():020d}{counter:06d}{uuid.uuid4().hex[:8]}"


def _log_order(message: Message) -> tuple[bool, Any, str]:
    return (message.timestamp is None, message.timestamp or 0, message.id or "")


def _parse_docs(docs: Any) -> list[Message]:
    messages = []
    for doc in docs:
        try:
            messages.append(message_from_firestore(doc.id, doc.to_dict()))
        except InvalidMessage as e:
            logger.warning(f"Skipping message: {e.message}")
    return sorted(messages, key=_log_order)


class MessageLog:
    """Append, read, delete and watch the messages of a site or store."""

    @staticmethod
    def stage(
        writer: Any, db: Client, kind: str, group_id: str, message: Message
    ) -> DocumentReference:
        """Queue ``message`` on a write batch or transaction.

        The timestamp is assigned here when the message has none. Returns the
        reference of the new message document.
        """
        if message.timestamp is None:
            message.timestamp = utc_now()
        ref = messages_ref(db, kind, group_id).document(new_message_id())
        writer.set(ref, to_firestore(message))
        message.id = ref.id
        return ref

    @staticmethod
    def append(db: Client, kind: str, group_id: str, message: Message) -> str:
        """Append ``message`` to the log and return its new id."""
        if message.timestamp is None:
            message.timestamp = utc_now()
        try:
            ref = messages_ref(db, kind, group_id).document(new_message_id())
            ref.set(to_firestore(message))
        except GoogleAPIError as e:
            current_app.logger.error(f"Error sending message to {group_id}: {e}")
            raise RemoteOperationFailed("Failed to send message.") from e
        message.id = ref.id
        return ref.id

    @staticmethod
    def list_messages(db: Client, kind: str, group_id: str) -> list[Message]:
        """Return the log in ascending timestamp order."""
        query = messages_ref(db, kind, group_id).order_by(
            "timestamp", direction=firestore.Query.ASCENDING
        )
        try:
            return _parse_docs(query.stream())
        except GoogleAPIError as e:
            current_app.logger.error(f"Error loading messages of {group_id}: {e}")
            raise RemoteOperationFailed("Failed to load messages.") from e

    @staticmethod
    def delete(
        db: Client, user: UserSession, group: Group, message_id: str
    ) -> None:
        """Hard-delete a message; only the group admin may do this."""
        require_admin(group, user)
        ref = messages_ref(db, group["kind"], group["id"]).document(message_id)
        try:
            if not ref.get().exists:
                raise NotFoundError("Message not found.")
            ref.delete()
        except GoogleAPIError as e:
            current_app.logger.error(f"Error deleting message {message_id}: {e}")
            raise RemoteOperationFailed("Failed to delete message.") from e
        current_app.logger.info(f"{user.uid} deleted message {message_id}")

    @staticmethod
    def subscribe(
        db: Client,
        kind: str,
        group_id: str,
        callback: Callable[[list[Message]], None],
    ) -> Any:
        """Watch the log, calling ``callback`` with the ordered list on every change.

        Returns the Firestore watch; call ``unsubscribe()`` on it to stop.
        """
        query = messages_ref(db, kind, group_id).order_by(
            "timestamp", direction=firestore.Query.ASCENDING
        )

        def on_snapshot(docs: Any, changes: Any, read_time: Any) -> None:
            callback(_parse_docs(docs))

        return query.on_snapshot(on_snapshot)

    @staticmethod
    def send_text(
        db: Client, user: UserSession, group: Group, text: str
    ) -> TextMessage:
        """Post a chat message from ``user``."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message cannot be empty.")
        require_member(group, user)
        message = TextMessage(text, Sender.from_session(user))
        MessageLog.append(db, group["kind"], group["id"], message)
        return message

    @staticmethod
    def send_image(
        db: Client, user: UserSession, group: Group, image_url: str
    ) -> ImageMessage:
        """Post an already uploaded image from ``user``."""
        require_member(group, user)
        message = ImageMessage(image_url, Sender.from_session(user))
        MessageLog.append(db, group["kind"], group["id"], message)
        return message


def system_notice(text: str) -> TextMessage:
    """Build a text message authored by the application."""
    return TextMessage(text, Sender.system())
