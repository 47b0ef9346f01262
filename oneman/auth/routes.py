from firebase_admin import auth, firestore
from flask import current_app, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from oneman.errors import ValidationError
from oneman.user.services import create_user_profile, get_user
from oneman.utils import validate_form

from . import bp
from .forms import SignupForm


@bp.route("/session_login", methods=["POST"])
def session_login():
    """
    Called by the client after a successful Firebase sign-in.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "idToken is required."}), 400
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (ValueError, auth.InvalidIdTokenError) as e:
        current_app.logger.warning(f"Rejected session login: {e}")
        return jsonify({"status": "error", "message": "Invalid token."}), 401

    uid = decoded_token["uid"]
    db = firestore.client()
    if get_user(db, uid) is None:
        return (
            jsonify({"status": "error", "message": "User not found in Firestore."}),
            404,
        )
    session["user_id"] = uid
    current_app.logger.info(f"Session opened for {uid}")
    return jsonify({"status": "success"})


@bp.route("/signup", methods=["POST"])
def signup():
    """Create the Firestore profile for an account created client-side."""
    form = SignupForm()
    validate_form(form)

    try:
        decoded_token = auth.verify_id_token(form.idToken.data)
    except (ValueError, auth.InvalidIdTokenError) as e:
        current_app.logger.warning(f"Rejected signup: {e}")
        return jsonify({"status": "error", "message": "Invalid token."}), 401

    db = firestore.client()
    username = form.username.data.strip()
    taken = list(
        db.collection("users")
        .where(filter=firestore.FieldFilter("username", "==", username))
        .limit(1)
        .stream()
    )
    if taken:
        raise ValidationError("Username already exists. Please choose another.")

    uid = decoded_token["uid"]
    create_user_profile(
        db,
        uid,
        email=decoded_token.get("email", ""),
        username=username,
        display_name=form.displayName.data,
        photo_url=decoded_token.get("picture"),
    )
    session["user_id"] = uid
    current_app.logger.info(f"Created profile for {uid}")
    return jsonify({"status": "success", "uid": uid}), 201


@bp.route("/logout", methods=["POST"])
def logout():
    """
    The actual sign-out is handled by the Firebase client-side SDK.
    This route clears the server-side session.
    """
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    """Hand the client a CSRF token to send back in the X-CSRFToken header."""
    return jsonify({"csrfToken": generate_csrf()})
