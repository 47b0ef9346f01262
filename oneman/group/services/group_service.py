"""Service layer for site and store records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from oneman.core.access import require_admin, require_member
from oneman.core.constants import GROUP_COLLECTIONS
from oneman.errors import (
    NotFoundError,
    RemoteOperationFailed,
    ValidationError,
)
from oneman.group.catalog import validate_selection
from oneman.utils import collection_for, group_ref, utc_now

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from oneman.group.models import Group, GroupSummary
    from oneman.user.models import UserSession


def snapshot_to_group(snapshot: Any, kind: str) -> Group:
    """Turn a group snapshot into a ``Group`` dictionary."""
    data = snapshot.to_dict() or {}
    data["id"] = snapshot.id
    data["kind"] = kind
    data["materials"] = data.get("materials") or []
    data["members"] = data.get("members") or []
    data["memberCount"] = len(data["members"])
    return cast("Group", data)


def _summary(group: Group) -> GroupSummary:
    return cast(
        "GroupSummary",
        {
            "id": group["id"],
            "kind": group["kind"],
            "name": group.get("name", ""),
            "location": group.get("location", ""),
            "photoURL": group.get("photoURL"),
            "memberCount": group.get("memberCount", 0),
            "createdAt": group.get("createdAt"),
        },
    )


class GroupService:
    """Service class for site and store operations."""

    @staticmethod
    def load_group(db: Client, kind: str, group_id: str) -> Group:
        """Fetch a group document.

        Raises:
            NotFoundError: If the document does not exist.
            RemoteOperationFailed: If Firestore cannot be reached.
        """
        try:
            snapshot = cast("DocumentSnapshot", group_ref(db, kind, group_id).get())
        except GoogleAPIError as e:
            current_app.logger.error(f"Error loading {kind} {group_id}: {e}")
            raise RemoteOperationFailed("Failed to load group.") from e
        if not snapshot.exists:
            raise NotFoundError("Group not found.")
        return snapshot_to_group(snapshot, kind)

    @staticmethod
    def get_group_for_member(
        db: Client, user: UserSession, kind: str, group_id: str
    ) -> Group:
        """Fetch a group, rejecting users who are not among its members."""
        group = GroupService.load_group(db, kind, group_id)
        require_member(group, user)
        return group

    @staticmethod
    def create_group(  # noqa: PLR0913
        db: Client,
        user: UserSession,
        kind: str,
        name: str,
        location: str,
        category: str | None = None,
        companies: list[str] | None = None,
        photo_url: str | None = None,
    ) -> Group:
        """Create a site or store owned by ``user``, who becomes its only member."""
        collection = collection_for(kind)
        name = (name or "").strip()
        location = (location or "").strip()
        if not name or not location:
            raise ValidationError("Please fill in name and location.")
        companies = list(companies or [])
        validate_selection(category, companies)

        group_data = {
            "name": name,
            "location": location,
            "photoURL": photo_url,
            "adminId": user.uid,
            "members": [user.uid],
            "materials": [],
            "selectedCategory": category or None,
            "selectedCompanies": companies,
            "createdAt": utc_now(),
            "lastActivity": "Just created",
        }
        try:
            _, new_ref = db.collection(collection).add(group_data)
        except GoogleAPIError as e:
            current_app.logger.error(f"Error creating {kind}: {e}")
            raise RemoteOperationFailed(f"Failed to create {kind}.") from e

        current_app.logger.info(f"{user.uid} created {kind} {new_ref.id}")
        group = cast("Group", {**group_data, "id": new_ref.id, "kind": kind})
        group["memberCount"] = 1
        return group

    @staticmethod
    def list_user_groups(
        db: Client, user: UserSession
    ) -> dict[str, list[GroupSummary]]:
        """Return the sites and stores ``user`` belongs to, newest first."""
        result: dict[str, list[GroupSummary]] = {}
        for kind, collection in GROUP_COLLECTIONS.items():
            try:
                docs = (
                    db.collection(collection)
                    .where(
                        filter=firestore.FieldFilter(
                            "members", "array_contains", user.uid
                        )
                    )
                    .stream()
                )
                groups = [_summary(snapshot_to_group(doc, kind)) for doc in docs]
            except GoogleAPIError as e:
                current_app.logger.error(f"Error loading {collection}: {e}")
                raise RemoteOperationFailed("Failed to load your groups.") from e
            groups.sort(key=lambda g: str(g.get("createdAt") or ""), reverse=True)
            result[collection] = groups
        return result

    @staticmethod
    def list_transfer_candidates(
        db: Client,
        user: UserSession,
        exclude_id: str | None = None,
        search: str = "",
    ) -> list[GroupSummary]:
        """List the user's other groups that materials can move to or from."""
        needle = (search or "").strip().lower()
        candidates = []
        for groups in GroupService.list_user_groups(db, user).values():
            for group in groups:
                if group["id"] == exclude_id:
                    continue
                haystack = (group.get("name", ""), group.get("location", ""))
                if needle and not any(needle in h.lower() for h in haystack):
                    continue
                candidates.append(group)
        return candidates

    @staticmethod
    def update_settings(  # noqa: PLR0913
        db: Client,
        user: UserSession,
        kind: str,
        group_id: str,
        name: str | None = None,
        location: str | None = None,
        photo_url: str | None = None,
    ) -> Group:
        """Update the name, location or photo of a group; admin only."""
        group = GroupService.load_group(db, kind, group_id)
        require_admin(group, user)

        updates: dict[str, Any] = {}
        if name is not None and name.strip():
            updates["name"] = name.strip()
        if location is not None and location.strip():
            updates["location"] = location.strip()
        if photo_url:
            updates["photoURL"] = photo_url
        if not updates:
            return group

        try:
            group_ref(db, kind, group_id).update(updates)
        except GoogleAPIError as e:
            current_app.logger.error(f"Error updating {kind} {group_id}: {e}")
            raise RemoteOperationFailed("Failed to update group.") from e
        current_app.logger.info(f"{user.uid} updated {kind} {group_id}: {updates}")
        group.update(updates)  # type: ignore[typeddict-item]
        return group
