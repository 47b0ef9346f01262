"""Routes for the group blueprint."""

from firebase_admin import firestore
from flask import g, jsonify, request

from oneman.auth.decorators import login_required
from oneman.utils import validate_form

from . import bp
from .catalog import catalog_as_dict, presets_for
from .forms import AddMemberForm, GroupForm, GroupSettingsForm
from .services.group_service import GroupService
from .services.membership import MembershipService


@bp.route("/", methods=["GET"])
@login_required
def list_groups():
    """List the sites and stores the signed-in user belongs to."""
    db = firestore.client()
    return jsonify(GroupService.list_user_groups(db, g.user))


@bp.route("/catalog", methods=["GET"])
@login_required
def catalog():
    """Return the material categories and company presets."""
    return jsonify(catalog_as_dict())


@bp.route("/transfer-candidates", methods=["GET"])
@login_required
def transfer_candidates():
    """List the groups material can be moved to or from."""
    db = firestore.client()
    groups = GroupService.list_transfer_candidates(
        db,
        g.user,
        exclude_id=request.args.get("exclude"),
        search=request.args.get("q", ""),
    )
    return jsonify({"groups": groups})


@bp.route("/<kind>", methods=["POST"])
@login_required
def create_group(kind):
    """Create a site or store owned by the signed-in user."""
    form = GroupForm()
    validate_form(form)
    db = firestore.client()
    group = GroupService.create_group(
        db,
        g.user,
        kind,
        name=form.name.data,
        location=form.location.data,
        category=form.category.data or None,
        companies=form.companies.data,
        photo_url=form.photoURL.data or None,
    )
    return jsonify({"group": group}), 201


@bp.route("/<kind>/<group_id>", methods=["GET"])
@login_required
def view_group(kind, group_id):
    """Return a group with its ledger and the presets of its companies."""
    db = firestore.client()
    group = GroupService.get_group_for_member(db, g.user, kind, group_id)
    presets = [
        {"name": p.name, "unit": p.unit}
        for p in presets_for(group.get("selectedCompanies") or [])
    ]
    return jsonify({"group": group, "presets": presets})


@bp.route("/<kind>/<group_id>/settings", methods=["POST"])
@login_required
def update_settings(kind, group_id):
    """Rename a group or change its photo."""
    form = GroupSettingsForm()
    validate_form(form)
    db = firestore.client()
    group = GroupService.update_settings(
        db,
        g.user,
        kind,
        group_id,
        name=form.name.data,
        location=form.location.data,
        photo_url=form.photoURL.data or None,
    )
    return jsonify({"group": group})


@bp.route("/<kind>/<group_id>/members", methods=["GET"])
@login_required
def list_members(kind, group_id):
    """List member profiles, optionally filtered with ``q``."""
    db = firestore.client()
    members = MembershipService.list_members(
        db, g.user, kind, group_id, search=request.args.get("q", "")
    )
    return jsonify({"members": members})


@bp.route("/<kind>/<group_id>/members", methods=["POST"])
@login_required
def add_member(kind, group_id):
    """Add a user to the group."""
    form = AddMemberForm()
    validate_form(form)
    db = firestore.client()
    group = MembershipService.add_member(
        db, g.user, kind, group_id, form.userId.data.strip()
    )
    return jsonify({"group": group})


@bp.route("/<kind>/<group_id>/members/<member_id>", methods=["DELETE"])
@login_required
def remove_member(kind, group_id, member_id):
    """Remove a member from the group."""
    db = firestore.client()
    group = MembershipService.remove_member(db, g.user, kind, group_id, member_id)
    return jsonify({"group": group})
