"""Data models for the chat blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

from oneman.core.constants import (
    MESSAGE_IMAGE,
    MESSAGE_MATERIAL,
    MESSAGE_TEXT,
    SYSTEM_USER_ID,
    SYSTEM_USER_NAME,
)
from oneman.errors import InvalidMessage

if TYPE_CHECKING:
    from oneman.user.models import UserSession


@dataclass
class Sender:
    """Snapshot of the author of a message, taken at send time."""

    user_id: str
    user_name: str
    user_photo_url: Optional[str] = None

    @classmethod
    def from_session(cls, user: UserSession) -> Sender:
        """Build a sender snapshot from the signed-in user."""
        return cls(user.uid, user.display_name, user.photo_url)

    @classmethod
    def system(cls) -> Sender:
        """Return the sender used for messages written by the application."""
        return cls(SYSTEM_USER_ID, SYSTEM_USER_NAME)

    @property
    def is_system(self) -> bool:
        """Return True for application-generated messages."""
        return self.user_id == SYSTEM_USER_ID


@dataclass
class MaterialData:
    """The ledger change documented by a material message.

    ``amount`` is signed: negative values record a removal. The ``source``
    fields name the other group of a transfer, when there is one.
    """

    name: str
    amount: float
    unit: str
    source: Optional[str] = None
    source_type: Optional[str] = None
    source_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
        }
        if self.source is not None:
            data["source"] = self.source
        if self.source_type is not None:
            data["sourceType"] = self.source_type
        if self.source_id is not None:
            data["sourceId"] = self.source_id
        return data


@dataclass
class TextMessage:
    text: str
    sender: Sender
    timestamp: Any = None
    id: Optional[str] = None
    type: ClassVar[str] = MESSAGE_TEXT

    def payload(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass
class ImageMessage:
    image_url: str
    sender: Sender
    timestamp: Any = None
    id: Optional[str] = None
    type: ClassVar[str] = MESSAGE_IMAGE

    def payload(self) -> dict[str, Any]:
        return {"imageURL": self.image_url}


@dataclass
class MaterialMessage:
    material: MaterialData
    sender: Sender
    timestamp: Any = None
    id: Optional[str] = None
    type: ClassVar[str] = MESSAGE_MATERIAL

    def payload(self) -> dict[str, Any]:
        return {"materialData": self.material.to_dict()}


Message = Union[TextMessage, ImageMessage, MaterialMessage]


def to_firestore(message: Message) -> dict[str, Any]:
    """Serialize a message into the document stored in the message log."""
    data = {
        "type": message.type,
        "timestamp": message.timestamp,
        "userId": message.sender.user_id,
        "userName": message.sender.user_name,
        **message.payload(),
    }
    if message.sender.user_photo_url:
        data["userPhotoURL"] = message.sender.user_photo_url
    return data


def to_json(message: Message) -> dict[str, Any]:
    """Serialize a message for an API response."""
    data = to_firestore(message)
    data["id"] = message.id
    timestamp = message.timestamp
    if hasattr(timestamp, "isoformat"):
        data["timestamp"] = timestamp.isoformat()
    return data


def message_from_firestore(doc_id: str, data: dict[str, Any] | None) -> Message:
    """Validate a stored document and turn it into a typed message.

    Raises:
        InvalidMessage: If the type is unknown or its payload is missing.
    """
    if not data:
        raise InvalidMessage(f"Message {doc_id} is empty.")

    sender = Sender(
        user_id=str(data.get("userId") or ""),
        user_name=str(data.get("userName") or ""),
        user_photo_url=data.get("userPhotoURL"),
    )
    timestamp = data.get("timestamp")
    message_type = data.get("type")

    if message_type == MESSAGE_TEXT:
        text = data.get("text")
        if not isinstance(text, str):
            raise InvalidMessage(f"Text message {doc_id} has no text.")
        return TextMessage(text, sender, timestamp, doc_id)

    if message_type == MESSAGE_IMAGE:
        image_url = data.get("imageURL")
        if not isinstance(image_url, str) or not image_url:
            raise InvalidMessage(f"Image message {doc_id} has no image URL.")
        return ImageMessage(image_url, sender, timestamp, doc_id)

    if message_type == MESSAGE_MATERIAL:
        raw = data.get("materialData")
        if not isinstance(raw, dict):
            raise InvalidMessage(f"Material message {doc_id} has no material data.")
        try:
            material = MaterialData(
                name=str(raw["name"]),
                amount=float(raw["amount"]),
                unit=str(raw["unit"]),
                source=raw.get("source"),
                source_type=raw.get("sourceType"),
                source_id=raw.get("sourceId"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidMessage(
                f"Material message {doc_id} is malformed: {e}"
            ) from e
        return MaterialMessage(material, sender, timestamp, doc_id)

    raise InvalidMessage(f"Message {doc_id} has unknown type {message_type!r}.")
