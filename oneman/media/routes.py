"""Routes for the media blueprint."""

from flask import jsonify, request

from oneman.auth.decorators import login_required

from . import bp
from .services import sign_upload


@bp.route("/cloudinary-sign", methods=["POST"])
@login_required
def cloudinary_sign():
    """Return signed parameters for a direct Cloudinary upload."""
    body = request.get_json(silent=True) or {}
    return jsonify(sign_upload(body.get("publicId"), body.get("folder")))
