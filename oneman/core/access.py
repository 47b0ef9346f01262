"""Membership and admin checks shared by every group operation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app

from oneman.errors import AccessDenied, NotAMember

if TYPE_CHECKING:
    from oneman.user.models import UserSession


def is_admin(group: dict[str, Any], user_id: str) -> bool:
    """Return True if ``user_id`` administers ``group``."""
    return bool(user_id) and user_id == group.get("adminId")


def is_member(group: dict[str, Any], user_id: str) -> bool:
    """Return True if ``user_id`` belongs to ``group``."""
    return bool(user_id) and user_id in group.get("members", [])


def require_member(group: dict[str, Any], user: UserSession) -> None:
    """Raise NotAMember unless ``user`` belongs to ``group``."""
    if not is_member(group, user.uid):
        current_app.logger.warning(
            f"User {user.uid} is not a member of {group.get('id')}"
        )
        raise NotAMember()


def require_admin(group: dict[str, Any], user: UserSession) -> None:
    """Raise AccessDenied unless ``user`` is the group admin."""
    if not is_admin(group, user.uid):
        current_app.logger.warning(
            f"User {user.uid} is not the admin of {group.get('id')}"
        )
        raise AccessDenied()
