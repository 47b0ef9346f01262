"""Forms for the inventory blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional


class AddMaterialForm(FlaskForm):
    """Form for adding material, optionally taken from another group."""

    name = StringField("Material", validators=[DataRequired(), Length(max=100)])
    unit = StringField("Unit", validators=[DataRequired(), Length(max=32)])
    # Parsed by the ledger so every entry point rejects the same inputs.
    amount = StringField("Amount")
    sourceKind = StringField("Source Type", validators=[Optional()])
    sourceId = StringField("Source", validators=[Optional()])


class RemoveMaterialForm(FlaskForm):
    """Form for removing material, optionally sent to another group."""

    entryId = StringField("Entry", validators=[DataRequired()])
    amount = StringField("Amount")
    destinationKind = StringField("Destination Type", validators=[Optional()])
    destinationId = StringField("Destination", validators=[Optional()])


class TransferForm(FlaskForm):
    """Form for moving material between two groups."""

    sourceKind = StringField("Source Type", validators=[DataRequired()])
    sourceId = StringField("Source", validators=[DataRequired()])
    destinationKind = StringField("Destination Type", validators=[DataRequired()])
    destinationId = StringField("Destination", validators=[DataRequired()])
    name = StringField("Material", validators=[DataRequired()])
    unit = StringField("Unit", validators=[DataRequired()])
    amount = StringField("Amount")
