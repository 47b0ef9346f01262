"""Forms for the group blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectMultipleField, StringField
from wtforms.validators import DataRequired, Length, Optional

from .catalog import MATERIAL_SETS


class GroupForm(FlaskForm):
    """Form for creating a new site or store."""

    name = StringField("Name", validators=[DataRequired(), Length(max=100)])
    location = StringField("Location", validators=[DataRequired(), Length(max=200)])
    category = StringField("Category", validators=[Optional()])
    companies = SelectMultipleField(
        "Companies",
        choices=[(s.id, s.name) for s in MATERIAL_SETS],
        validators=[Optional()],
    )
    photoURL = StringField("Photo URL", validators=[Optional(), Length(max=500)])


class GroupSettingsForm(FlaskForm):
    """Form for renaming a group or changing its photo."""

    name = StringField("Name", validators=[Optional(), Length(max=100)])
    location = StringField("Location", validators=[Optional(), Length(max=200)])
    photoURL = StringField("Photo URL", validators=[Optional(), Length(max=500)])


class AddMemberForm(FlaskForm):
    """Form for adding a user found through the directory lookup."""

    userId = StringField("User", validators=[DataRequired()])
