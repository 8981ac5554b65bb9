"""
Authentication Forms - staff login by username
"""

from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Length


class LoginForm(FlaskForm):
    username = StringField(
        "Username",
        id="username_login",
        validators=[
            DataRequired(message="Username is required"),
            Length(max=64),
        ],
        render_kw={
            "placeholder": "Username",
            "class": "form-control",
            "autofocus": True
        }
    )

    password = PasswordField(
        "Password",
        id="pwd_login",
        validators=[DataRequired(message="Password is required")],
        render_kw={
            "placeholder": "Password",
            "class": "form-control"
        }
    )

    remember_me = BooleanField("Remember me")

    submit = SubmitField("Sign in")
