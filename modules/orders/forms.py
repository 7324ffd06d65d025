import re

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import (
    Form, StringField, IntegerField, DecimalField, DateField, DateTimeField,
    FieldList, FormField,
)
from wtforms.validators import (
    DataRequired, InputRequired, Optional, NumberRange, Length, ValidationError,
)

import exceptions

# Accepted due date shapes: plain dates from <input type="date"> and JS ISO strings
DUE_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
]

_camel_re = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _camel_re.sub("_", str(key)).lower()


def _scalar(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def json_to_formdata(payload) -> MultiDict:
    """
    Flattens a camelCase JSON object into WTForms formdata:
      {"dueDate": "...", "products": [{"productId": 1}]}
      -> dueDate as due_date, products-0-product_id
    Nested objects that are not list items are ignored.
    """
    pairs = []
    for key, value in (payload or {}).items():
        name = _snake(key)
        if isinstance(value, list):
            for idx, item in enumerate(value):
                if not isinstance(item, dict):
                    continue
                for sub_key, sub_value in item.items():
                    pairs.append((f"{name}-{idx}-{_snake(sub_key)}", _scalar(sub_value)))
        elif isinstance(value, dict):
            continue
        else:
            pairs.append((name, _scalar(value)))
    return MultiDict(pairs)


def _first_error(name, errors):
    if isinstance(errors, dict):
        for sub_name, sub_errors in errors.items():
            msg = _first_error(sub_name, sub_errors)
            if msg:
                return msg
        return None
    for idx, err in enumerate(errors):
        if isinstance(err, dict):
            # FieldList of FormField: one dict of errors per entry
            for sub_name, sub_errors in err.items():
                if sub_errors:
                    return f"{name}[{idx}].{sub_name}: {sub_errors[0]}"
        elif err:
            return err
    return None


class JsonFormMixin:
    """Builds a form from a JSON body and remembers which keys were sent."""

    @classmethod
    def from_json(cls, payload):
        payload = payload if isinstance(payload, dict) else {}
        form = cls(formdata=json_to_formdata(payload))
        form.submitted = {_snake(k) for k in payload}
        return form

    def submitted_data(self) -> dict:
        return {
            name: field.data
            for name, field in self._fields.items()
            if name in self.submitted
        }

    def validate_or_raise(self):
        if self.validate():
            return self
        for name, field in self._fields.items():
            msg = _first_error(name, field.errors)
            if msg:
                raise exceptions.ValidationError(msg, extra={"errors": self.errors})
        raise exceptions.ValidationError(extra={"errors": self.errors})


class ProductLineForm(Form):
    product_id = IntegerField(validators=[InputRequired(message="productId is required")])
    quantity = IntegerField(validators=[
        InputRequired(message="quantity is required"),
        NumberRange(min=1, message="quantity must be at least 1"),
    ])
    unit_price = DecimalField(places=2, validators=[Optional(), NumberRange(min=0)])
    notes = StringField(validators=[Optional(), Length(max=1000)])


class OrderCreateForm(JsonFormMixin, FlaskForm):
    """
    Body of POST /orders. Enum values stay strings here and are checked
    case-insensitively by the service.
    """
    customer_note = StringField(validators=[Optional(), Length(max=2000)])
    due_date = DateTimeField(format=DUE_DATE_FORMATS, validators=[DataRequired(message="Due date is required")])
    description = StringField(validators=[Optional(), Length(max=4000)])
    priority = StringField(validators=[Optional()])
    status = StringField(validators=[Optional()])
    worker_contact_id = IntegerField(validators=[Optional()])
    products = FieldList(FormField(ProductLineForm), min_entries=0)

    def validate_products(self, field):
        if not field.entries:
            raise ValidationError("At least one product is required")


class OrderUpdateForm(OrderCreateForm):
    """Body of PUT /orders/<id>: every field is optional."""
    due_date = DateTimeField(format=DUE_DATE_FORMATS, validators=[Optional()])

    def validate_products(self, field):
        pass


class StatusForm(JsonFormMixin, FlaskForm):
    status = StringField(validators=[DataRequired(message="Status is required")])


class WorkerForm(JsonFormMixin, FlaskForm):
    worker_contact_id = IntegerField(validators=[Optional()])


class OrderListForm(JsonFormMixin, FlaskForm):
    page = IntegerField(default=1, validators=[Optional(), NumberRange(min=1)])
    limit = IntegerField(default=10, validators=[Optional(), NumberRange(min=1, max=100)])
    status = StringField(validators=[Optional()])
    priority = StringField(validators=[Optional()])
    search = StringField(validators=[Optional(), Length(max=200)])
    sort_by = StringField(default="createdAt", validators=[Optional()])
    sort_order = StringField(default="desc", validators=[Optional()])


class ReportFilterForm(JsonFormMixin, FlaskForm):
    status = StringField(validators=[Optional()])
    priority = StringField(validators=[Optional()])
    search = StringField(validators=[Optional(), Length(max=200)])
    date_from = DateField(validators=[Optional()])
    date_to = DateField(validators=[Optional()])
    sort_by = StringField(default="createdAt", validators=[Optional()])
    sort_order = StringField(default="desc", validators=[Optional()])


class LineProgressForm(JsonFormMixin, FlaskForm):
    completed_qty = IntegerField(validators=[
        InputRequired(message="completedQty is required"),
        NumberRange(min=0, message="completedQty cannot be negative"),
    ])
