"""Utility functions for the application."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from .core.constants import GROUP_COLLECTIONS, MESSAGES_COLLECTION
from .errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference


def collection_for(kind: str) -> str:
    """Return the collection name holding groups of ``kind``."""
    try:
        return GROUP_COLLECTIONS[kind]
    except KeyError:
        raise NotFoundError(f"Unknown group type: {kind}") from None


def group_ref(db: Client, kind: str, group_id: str) -> DocumentReference:
    """Return the document reference of a site or store."""
    return db.collection(collection_for(kind)).document(group_id)


def messages_ref(db: Client, kind: str, group_id: str) -> CollectionReference:
    """Return the message log sub-collection of a site or store."""
    return group_ref(db, kind, group_id).collection(MESSAGES_COLLECTION)


def utc_now() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def first_form_error(form: Any) -> str:
    """Return a readable message for the first failing field of a form."""
    for field_name, errors in form.errors.items():
        if errors:
            return f"{field_name}: {errors[0]}"
    return "Validation failed."


def validate_form(form: Any) -> None:
    """Validate a submitted form, raising ValidationError when it fails."""
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
