"""Service layer for the user directory and profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from oneman.core.constants import (
    PREFIX_SEARCH_SENTINEL,
    SEARCH_MIN_LENGTH,
    SEARCH_RESULT_LIMIT,
    USERS_COLLECTION,
)
from oneman.errors import RemoteOperationFailed

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from .models import SearchUser, User

SEARCH_FIELDS = ("username", "email", "displayName", "photoURL")


def _to_search_user(doc: Any) -> SearchUser:
    data = doc.to_dict() or {}
    record = {key: data.get(key) for key in SEARCH_FIELDS if key in data}
    record["id"] = doc.id
    return cast("SearchUser", record)


def search_by_email_substring(db: Client, term: str | None) -> list[SearchUser]:
    """Find up to ten users whose email contains ``term``, ignoring case.

    Terms shorter than two characters return an empty list without querying
    Firestore. Users are filtered in process to avoid needing a composite
    index, so the result order is whatever order Firestore streams them in.
    """
    if not term or len(term) < SEARCH_MIN_LENGTH:
        return []

    needle = term.lower()
    try:
        docs = db.collection(USERS_COLLECTION).stream()
        results = []
        for doc in docs:
            email = (doc.to_dict() or {}).get("email")
            if email and needle in email.lower():
                results.append(_to_search_user(doc))
                if len(results) >= SEARCH_RESULT_LIMIT:
                    break
    except GoogleAPIError as e:
        current_app.logger.error(f"Error searching users by email: {e}")
        raise RemoteOperationFailed("Failed to search users by email.") from e
    return results


def search_by_prefix(
    db: Client, term: str | None, field: str = "email"
) -> list[SearchUser]:
    """Find up to ten users whose ``field`` starts with ``term``.

    This is a case-sensitive range query served by Firestore's single-field
    index.
    """
    if not term or len(term) < SEARCH_MIN_LENGTH:
        return []

    try:
        query = (
            db.collection(USERS_COLLECTION)
            .where(filter=firestore.FieldFilter(field, ">=", term))
            .where(
                filter=firestore.FieldFilter(
                    field, "<=", term + PREFIX_SEARCH_SENTINEL
                )
            )
            .limit(SEARCH_RESULT_LIMIT)
        )
        return [_to_search_user(doc) for doc in query.stream()]
    except GoogleAPIError as e:
        current_app.logger.error(f"Error searching users: {e}")
        raise RemoteOperationFailed("Failed to search users.") from e


def get_user(db: Client, user_id: str) -> User | None:
    """Fetch a user by their ID."""
    user_doc = cast(
        "DocumentSnapshot", db.collection(USERS_COLLECTION).document(user_id).get()
    )
    if not user_doc.exists:
        return None
    data = user_doc.to_dict()
    if data is None:
        return None
    data["id"] = user_id
    return cast("User", data)


def get_users(db: Client, user_ids: list[str]) -> list[User]:
    """Fetch several users, skipping ids without a profile document."""
    users = []
    for user_id in user_ids:
        user = get_user(db, user_id)
        if user is not None:
            users.append(user)
    return users


def create_user_profile(
    db: Client,
    uid: str,
    email: str,
    username: str,
    display_name: str | None = None,
    photo_url: str | None = None,
) -> None:
    """Create the ``users/{uid}`` document for a freshly signed-up account."""
    db.collection(USERS_COLLECTION).document(uid).set(
        {
            "username": username,
            "email": email,
            "displayName": display_name or username,
            "photoURL": photo_url,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
    )


def update_profile(db: Client, user_id: str, update_data: dict[str, Any]) -> None:
    """Update a user's profile in Firestore."""
    allowed = {"username", "displayName", "photoURL"}
    changes = {k: v for k, v in update_data.items() if k in allowed and v is not None}
    if not changes:
        return
    try:
        db.collection(USERS_COLLECTION).document(user_id).update(changes)
    except GoogleAPIError as e:
        current_app.logger.error(f"Error updating profile for {user_id}: {e}")
        raise RemoteOperationFailed("Failed to update profile.") from e
