"""Routes for the inventory blueprint."""

from firebase_admin import firestore
from flask import g, jsonify

from oneman.auth.decorators import login_required
from oneman.errors import MaterialNotFound
from oneman.group.services.group_service import GroupService
from oneman.utils import validate_form

from . import bp
from .forms import AddMaterialForm, RemoveMaterialForm, TransferForm
from .models import GroupAddress, TransferRequest
from .services import InventoryService
from .workflow import TransferFlow


def _optional_address(kind, group_id):
    if kind and group_id:
        return GroupAddress(kind.strip(), group_id.strip())
    return None


def _run_flow(amount, counterparty, executor):
    flow = TransferFlow()
    flow.enter_amount(amount)
    if counterparty is None:
        flow.skip_counterparty()
    else:
        flow.choose_counterparty(counterparty)
    return flow.submit(executor)


@bp.route("/<kind>/<group_id>/add", methods=["POST"])
@login_required
def add_material(kind, group_id):
    """Add material to a group, taking it from ``source`` when one is given."""
    form = AddMaterialForm()
    validate_form(form)
    db = firestore.client()
    here = GroupAddress(kind, group_id)
    name, unit = form.name.data.strip(), form.unit.data.strip()

    def execute(amount, source):
        if source is None:
            return InventoryService.add_material(
                db, g.user, kind, group_id, name, unit, amount
            )
        result = InventoryService.transfer(
            db,
            g.user,
            TransferRequest(source, here, name, unit, amount, log_to=here),
        )
        return result.destination_materials

    materials = _run_flow(
        form.amount.data,
        _optional_address(form.sourceKind.data, form.sourceId.data),
        execute,
    )
    return jsonify({"materials": materials})


@bp.route("/<kind>/<group_id>/remove", methods=["POST"])
@login_required
def remove_material(kind, group_id):
    """Remove material from a group, sending it to ``destination`` if given."""
    form = RemoveMaterialForm()
    validate_form(form)
    db = firestore.client()
    here = GroupAddress(kind, group_id)
    entry_id = form.entryId.data.strip()

    def execute(amount, destination):
        if destination is None:
            return InventoryService.remove_material(
                db, g.user, kind, group_id, entry_id, amount
            )
        group = GroupService.get_group_for_member(db, g.user, kind, group_id)
        entry = next((e for e in group["materials"] if e.get("id") == entry_id), None)
        if entry is None:
            raise MaterialNotFound()
        result = InventoryService.transfer(
            db,
            g.user,
            TransferRequest(
                here, destination, entry["name"], entry["unit"], amount, log_to=here
            ),
        )
        return result.source_materials

    materials = _run_flow(
        form.amount.data,
        _optional_address(form.destinationKind.data, form.destinationId.data),
        execute,
    )
    return jsonify({"materials": materials})


@bp.route("/transfer", methods=["POST"])
@login_required
def transfer():
    """Move material from one group to another."""
    form = TransferForm()
    validate_form(form)
    db = firestore.client()
    result = InventoryService.transfer(
        db,
        g.user,
        TransferRequest(
            GroupAddress(form.sourceKind.data, form.sourceId.data),
            GroupAddress(form.destinationKind.data, form.destinationId.data),
            form.name.data.strip(),
            form.unit.data.strip(),
            form.amount.data,
        ),
    )
    return jsonify(
        {
            "sourceMaterials": result.source_materials,
            "destinationMaterials": result.destination_materials,
            "messageId": result.message_id,
            "amount": result.amount,
        }
    )
