"""WTForms schemas for invoice submissions and sign-in."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from werkzeug.datastructures import MultiDict
from wtforms import DecimalField as WTFormsDecimalField
from wtforms import Form, HiddenField, PasswordField, StringField
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Email,
    InputRequired,
    Length,
    ValidationError,
)

from invoice_dashboard.models import INVOICE_STATUSES
from invoice_dashboard.utils.numeric import MAX_AMOUNT, is_storable_amount

CUSTOMER_MESSAGE = "Please select a customer."
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status."


class StorableAmount:
    """Require an amount that rounds to at least one cent and fits the
    integer amount column.

    ``NumberRange(min=0)`` is inclusive and would pass ``0.001``, which rounds
    to zero cents.
    """

    def __init__(self, message=None):
        self.message = message

    def __call__(self, form, field):
        if field.data is None or not is_storable_amount(field.data):
            message = self.message or field.gettext(
                "Number must be between 0.01 and %(max)s."
            ) % {"max": MAX_AMOUNT}
            raise ValidationError(message)


class AmountField(WTFormsDecimalField):
    """Decimal field that leaves ``data`` unset for unusable input.

    Blank, unparseable, NaN and infinite values all end up as ``None`` so the
    field's validators report a single message instead of WTForms' generic
    "Not a valid decimal value".
    """

    def process_formdata(self, valuelist):
        self.data = None
        if not valuelist or valuelist[0] is None:
            return
        text = str(valuelist[0]).strip()
        if not text:
            return
        try:
            value = Decimal(text)
        except InvalidOperation:
            return
        if value.is_finite():
            self.data = value


class InvoiceForm(Form):
    """Full invoice shape, including the server-generated fields."""

    id = HiddenField("ID")
    customer_id = StringField(
        "Customer",
        name="customerId",
        validators=[InputRequired(message=CUSTOMER_MESSAGE)],
    )
    amount = AmountField(
        "Amount", validators=[StorableAmount(message=AMOUNT_MESSAGE)]
    )
    status = StringField(
        "Status",
        validators=[AnyOf(INVOICE_STATUSES, message=STATUS_MESSAGE)],
    )
    date = HiddenField("Date")


class CreateInvoiceForm(InvoiceForm):
    # Assigned by the store and the create action, never by the user.
    id = None
    date = None


class UpdateInvoiceForm(InvoiceForm):
    id = None
    date = None


class LoginForm(Form):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField(
        "Password", validators=[DataRequired(), Length(min=6)]
    )


@dataclass(frozen=True)
class InvoiceFields:
    customer_id: str
    amount: Decimal
    status: str


@dataclass(frozen=True)
class ParseResult:
    success: bool
    data: Optional[InvoiceFields] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)


def as_formdata(raw) -> MultiDict:
    if hasattr(raw, "getlist"):
        return raw
    return MultiDict({k: v for k, v in (raw or {}).items() if v is not None})


def safe_parse(form_class, raw) -> ParseResult:
    """Validate ``raw`` form fields against ``form_class`` without raising.

    ``raw`` may be a request's ``MultiDict`` or a plain mapping.  Errors are
    keyed by the submitted field name (``customerId`` rather than
    ``customer_id``).
    """

    form = form_class(formdata=as_formdata(raw))
    if not form.validate():
        errors = {f.name: list(f.errors) for f in form if f.errors}
        return ParseResult(success=False, field_errors=errors)
    return ParseResult(
        success=True,
        data=InvoiceFields(
            customer_id=form.customer_id.data,
            amount=form.amount.data,
            status=form.status.data,
        ),
    )
