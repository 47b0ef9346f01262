"""Forms for the user blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from wtforms import StringField
from wtforms.validators import Length, Optional


class UpdateProfileForm(FlaskForm):
    """Form for editing the signed-in user's profile."""

    username = StringField("Username", validators=[Optional(), Length(max=64)])
    displayName = StringField("Display Name", validators=[Optional(), Length(max=64)])
    profile_picture = FileField(
        "Profile Picture",
        validators=[FileAllowed(["jpg", "png", "jpeg", "webp"]), Optional()],
    )
