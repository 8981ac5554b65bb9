from flask_wtf import FlaskForm
from wtforms import DateField, SelectField, StringField, SubmitField
from wtforms.validators import Optional, ValidationError


class DateRangeForm(FlaskForm):
    """Plan sales analytics window (GET form, no CSRF)."""

    class Meta:
        csrf = False

    start = DateField("Start date", validators=[Optional()])
    end = DateField("End date", validators=[Optional()])
    q = StringField("Search", validators=[Optional()])
    submit = SubmitField("Search")

    def validate_end(self, field):
        if field.data and self.start.data and field.data < self.start.data:
            raise ValidationError("End date must not be before start date")


class CommissionFilterForm(FlaskForm):
    """Sell history filters: month, year and staff role."""

    class Meta:
        csrf = False

    month = SelectField("Month", validators=[Optional()])
    year = SelectField("Year", validators=[Optional()])
    type = SelectField(
        "User type",
        choices=[
            ("all", "All"),
            ("VENDOR", "Vendors"),
            ("SYSTEM_ADMINISTRATOR", "Administrators"),
        ],
        default="all",
        validators=[Optional()],
    )
    submit = SubmitField("Filter")

    def __init__(self, *args, month_names=(), years=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.month.choices = [("all", "All months")] + [
            (str(i), name) for i, name in enumerate(month_names)
        ]
        self.year.choices = [("all", "All years")] + [(str(y), str(y)) for y in years]
