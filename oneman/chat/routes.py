"""Routes for the chat blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from oneman.auth.decorators import login_required
from oneman.core.constants import CHAT_UPLOAD_FOLDER
from oneman.group.services.group_service import GroupService
from oneman.media.services import build_public_id, upload_image
from oneman.utils import validate_form

from . import bp
from .forms import ImageMessageForm, MessageForm
from .models import to_json
from .services import MessageLog


@bp.route("/<kind>/<group_id>/messages", methods=["GET"])
@login_required
def list_messages(kind, group_id):
    """Return the group's message log, oldest first."""
    db = firestore.client()
    GroupService.get_group_for_member(db, g.user, kind, group_id)
    messages = MessageLog.list_messages(db, kind, group_id)
    return jsonify({"messages": [to_json(m) for m in messages]})


@bp.route("/<kind>/<group_id>/messages", methods=["POST"])
@login_required
def send_message(kind, group_id):
    """Post a text message."""
    form = MessageForm()
    validate_form(form)
    db = firestore.client()
    group = GroupService.load_group(db, kind, group_id)
    message = MessageLog.send_text(db, g.user, group, form.text.data)
    return jsonify({"message": to_json(message)}), 201


@bp.route("/<kind>/<group_id>/images", methods=["POST"])
@login_required
def send_image(kind, group_id):
    """Upload an image and post it to the message log."""
    form = ImageMessageForm()
    validate_form(form)
    db = firestore.client()
    group = GroupService.get_group_for_member(db, g.user, kind, group_id)
    public_id = build_public_id(g.user.uid, CHAT_UPLOAD_FOLDER)
    image_url = upload_image(form.image.data, public_id, CHAT_UPLOAD_FOLDER)
    message = MessageLog.send_image(db, g.user, group, image_url)
    return jsonify({"message": to_json(message)}), 201


@bp.route("/<kind>/<group_id>/messages/<message_id>", methods=["DELETE"])
@login_required
def delete_message(kind, group_id, message_id):
    """Delete a message; group admin only."""
    db = firestore.client()
    group = GroupService.load_group(db, kind, group_id)
    MessageLog.delete(db, g.user, group, message_id)
    return jsonify({"status": "success"})
