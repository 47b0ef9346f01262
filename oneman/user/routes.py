"""Routes for the user blueprint."""

from firebase_admin import firestore
from flask import g, jsonify, request

from oneman.auth.decorators import login_required
from oneman.core.constants import PROFILE_UPLOAD_FOLDER
from oneman.errors import NotFoundError
from oneman.media.services import build_public_id, upload_image
from oneman.utils import validate_form

from . import bp
from .forms import UpdateProfileForm
from .services import (
    get_user,
    search_by_email_substring,
    search_by_prefix,
    update_profile,
)


@bp.route("/api/search-users-email", methods=["GET"])
@login_required
def search_users_email():
    """Case-insensitive substring search on email addresses."""
    db = firestore.client()
    users = search_by_email_substring(db, request.args.get("q"))
    return jsonify({"users": users})


@bp.route("/api/search-users", methods=["GET"])
@login_required
def search_users():
    """Prefix search on email, or on username with ``field=username``."""
    field = "username" if request.args.get("field") == "username" else "email"
    db = firestore.client()
    users = search_by_prefix(db, request.args.get("q"), field=field)
    return jsonify({"users": users})


@bp.route("/user/me", methods=["GET"])
@login_required
def get_profile():
    """Return the signed-in user's profile."""
    db = firestore.client()
    user = get_user(db, g.user.uid)
    if user is None:
        raise NotFoundError("User not found.")
    return jsonify({"user": user})


@bp.route("/user/me", methods=["POST"])
@login_required
def edit_profile():
    """Update the signed-in user's username, display name or picture."""
    form = UpdateProfileForm()
    validate_form(form)

    update_data = {
        "username": form.username.data or None,
        "displayName": form.displayName.data or None,
    }
    if form.profile_picture.data:
        public_id = build_public_id(g.user.uid, PROFILE_UPLOAD_FOLDER)
        update_data["photoURL"] = upload_image(
            form.profile_picture.data, public_id, PROFILE_UPLOAD_FOLDER
        )

    db = firestore.client()
    update_profile(db, g.user.uid, update_data)
    return jsonify({"user": get_user(db, g.user.uid)})
