from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, SelectMultipleField, FloatField, HiddenField
from wtforms.validators import DataRequired, Length, NumberRange


class AdminLoginForm(FlaskForm):
    username = StringField("Username", validators=[DataRequired()])
    user_id = StringField("Admin ID", validators=[DataRequired(), Length(min=3, max=20)])
    password = PasswordField("Password", validators=[DataRequired()])
    submit = SubmitField("Login")


class RolloverPreviewForm(FlaskForm):
    # choices are filled per request from the school's classes
    class_ids = SelectMultipleField("Classes", coerce=int, validators=[DataRequired(message="Select at least one class.")])
    threshold = FloatField(
        "Promotion threshold (%)",
        validators=[NumberRange(min=0, max=100, message="Threshold must be between 0 and 100.")],
    )
    submit = SubmitField("Preview")


class RolloverCommitForm(FlaskForm):
    token = HiddenField("Preview token", validators=[DataRequired()])
    submit = SubmitField("Apply rollover")
