"""Data models for the user blueprint."""

from __future__ import annotations

from collections import UserDict

from flask_login import UserMixin

from oneman.core.constants import ANONYMOUS_USER_NAME
from oneman.core.types import FirestoreDocument


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    username: str
    email: str
    displayName: str
    photoURL: str
    uid: str


class SearchUser(FirestoreDocument, total=False):
    """A user record as returned by the directory lookup."""

    username: str
    email: str
    displayName: str
    photoURL: str


class UserSession(UserDict, UserMixin):
    """The signed-in user, passed explicitly to every service call."""

    def get_id(self) -> str:
        """Return the user ID."""
        return str(self.get("uid", ""))

    @property
    def uid(self) -> str:
        """Return the Firebase user id."""
        return self.get_id()

    @property
    def display_name(self) -> str:
        """Return the name shown next to this user's messages."""
        if name := self.get("displayName"):
            return str(name)
        email = self.get("email") or ""
        if email:
            return email.split("@")[0]
        return ANONYMOUS_USER_NAME

    @property
    def photo_url(self) -> str | None:
        """Return the user's profile picture URL, if any."""
        return self.get("photoURL") or None
