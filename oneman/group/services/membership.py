"""Service layer for adding and removing group members."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from oneman.chat.services import MessageLog, system_notice
from oneman.errors import CannotRemoveAdmin, NotFoundError, RemoteOperationFailed
from oneman.user.services import get_user, get_users
from oneman.utils import group_ref

from oneman.core.access import is_admin, require_admin

from .group_service import GroupService

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from oneman.group.models import Group
    from oneman.user.models import User, UserSession


def with_member(group: Group, user_id: str) -> Group:
    """Return a copy of ``group`` with ``user_id`` among its members."""
    members = list(group.get("members", []))
    if user_id not in members:
        members.append(user_id)
    return cast("Group", {**group, "members": members, "memberCount": len(members)})


def without_member(group: Group, user_id: str) -> Group:
    """Return a copy of ``group`` without ``user_id``.

    Raises:
        CannotRemoveAdmin: If ``user_id`` is the group admin.
    """
    if is_admin(group, user_id):
        raise CannotRemoveAdmin()
    members = [m for m in group.get("members", []) if m != user_id]
    return cast("Group", {**group, "members": members, "memberCount": len(members)})


class MembershipService:
    """Service class for membership changes, each logged as a system message."""

    @staticmethod
    def add_member(
        db: Client, user: UserSession, kind: str, group_id: str, new_user_id: str
    ) -> Group:
        """Add a user to a group; admin only.

        Adding an existing member changes nothing and logs nothing.
        """
        group = GroupService.load_group(db, kind, group_id)
        require_admin(group, user)

        if new_user_id in group.get("members", []):
            return group

        new_user = get_user(db, new_user_id)
        if new_user is None:
            raise NotFoundError("User not found.")
        label = new_user.get("email") or new_user.get("username") or new_user_id

        batch = db.batch()
        batch.update(
            group_ref(db, kind, group_id),
            {"members": firestore.ArrayUnion([new_user_id])},
        )
        MessageLog.stage(
            batch,
            db,
            kind,
            group_id,
            system_notice(f"{label} was added to the group"),
        )
        try:
            batch.commit()
        except GoogleAPIError as e:
            current_app.logger.error(f"Error adding member to {group_id}: {e}")
            raise RemoteOperationFailed("Failed to add member.") from e

        current_app.logger.info(f"{user.uid} added {new_user_id} to {group_id}")
        return with_member(group, new_user_id)

    @staticmethod
    def remove_member(
        db: Client, user: UserSession, kind: str, group_id: str, member_id: str
    ) -> Group:
        """Remove a member from a group; admin only, never the admin."""
        group = GroupService.load_group(db, kind, group_id)
        require_admin(group, user)
        updated = without_member(group, member_id)

        if member_id not in group.get("members", []):
            return updated

        removed = get_user(db, member_id)
        label = (removed or {}).get("email")
        text = (
            f"{label} was removed from the group"
            if label
            else "A member was removed from the group"
        )

        batch = db.batch()
        batch.update(
            group_ref(db, kind, group_id),
            {"members": firestore.ArrayRemove([member_id])},
        )
        MessageLog.stage(batch, db, kind, group_id, system_notice(text))
        try:
            batch.commit()
        except GoogleAPIError as e:
            current_app.logger.error(f"Error removing member from {group_id}: {e}")
            raise RemoteOperationFailed("Failed to remove member.") from e

        current_app.logger.info(f"{user.uid} removed {member_id} from {group_id}")
        return updated

    @staticmethod
    def list_members(
        db: Client, user: UserSession, kind: str, group_id: str, search: str = ""
    ) -> list[User]:
        """Resolve a group's member ids to profiles, optionally filtered.

        The filter is a case-insensitive substring match on display name or
        email.
        """
        group = GroupService.get_group_for_member(db, user, kind, group_id)
        members = get_users(db, group.get("members", []))
        needle = (search or "").strip().lower()
        if not needle:
            return members
        return [
            m
            for m in members
            if needle in (m.get("displayName") or "").lower()
            or needle in (m.get("email") or "").lower()
        ]
