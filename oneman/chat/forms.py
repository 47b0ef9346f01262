"""Forms for the chat blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import StringField
from wtforms.validators import DataRequired, Length


class MessageForm(FlaskForm):
    text = StringField("Message", validators=[DataRequired(), Length(max=2000)])


class ImageMessageForm(FlaskForm):
    image = FileField(
        "Image",
        validators=[FileRequired(), FileAllowed(["jpg", "png", "jpeg", "gif", "webp"])],
    )
