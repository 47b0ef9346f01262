"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional


class SignupForm(FlaskForm):
    """Profile details sent after the client created a Firebase account."""

    idToken = StringField("ID Token", validators=[DataRequired()])
    username = StringField("Username", validators=[DataRequired(), Length(max=64)])
    displayName = StringField("Display Name", validators=[Optional(), Length(max=64)])
