"""Server-side invoice actions.

Each action validates form input, runs one statement through the store it
is given and answers with an :data:`Outcome`: either a :class:`Redirect` to
follow or a :class:`Result` carrying the form state to show again.  Actions
never raise for bad input or database errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Union

from invoice_dashboard.forms import CreateInvoiceForm, UpdateInvoiceForm, safe_parse
from invoice_dashboard.store import Failure
from invoice_dashboard.utils.numeric import to_cents

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
INVOICES_PATH = "/dashboard/invoices"
REVALIDATED_PATHS = (DASHBOARD_PATH, INVOICES_PATH)


@dataclass(frozen=True)
class State:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class Redirect:
    path: str


@dataclass(frozen=True)
class Result:
    state: State


Outcome = Union[Redirect, Result]
Invalidate = Callable[[str], None]


def _finish(invalidate: Invalidate) -> Redirect:
    for path in REVALIDATED_PATHS:
        invalidate(path)
    return Redirect(INVOICES_PATH)


def create_invoice(
    store,
    invalidate: Invalidate,
    prev_state: Optional[State],
    formdata,
    today: Optional[date] = None,
) -> Outcome:
    """Insert a new invoice from ``formdata``.

    ``prev_state`` is the state the form was last rendered with; it is
    accepted for symmetry with the form handlers and otherwise unused.
    ``today`` defaults to the current UTC date.
    """
    parsed = safe_parse(CreateInvoiceForm, formdata)
    if not parsed.success:
        return Result(
            State(
                errors=parsed.field_errors,
                message="Missing Fields. Failed to Create Invoice.",
            )
        )

    data = parsed.data
    amount_in_cents = to_cents(data.amount)
    issued = (today or datetime.now(timezone.utc).date()).isoformat()

    result = store.insert_invoice(
        data.customer_id, amount_in_cents, data.status, issued
    )
    if isinstance(result, Failure):
        return Result(State(message="Database Error: Failed to Create Invoice."))

    logger.info(
        "Created invoice for customer %s (%s cents, %s)",
        data.customer_id,
        amount_in_cents,
        data.status,
    )
    return _finish(invalidate)


def update_invoice(
    store,
    invalidate: Invalidate,
    invoice_id: str,
    prev_state: Optional[State],
    formdata,
) -> Outcome:
    """Overwrite customer, amount and status of ``invoice_id``.

    An id that matches no row is not an error; the redirect still happens.
    """
    parsed = safe_parse(UpdateInvoiceForm, formdata)
    if not parsed.success:
        return Result(
            State(
                errors=parsed.field_errors,
                message="Missing Fields. Failed to Update Invoice.",
            )
        )

    data = parsed.data
    amount_in_cents = to_cents(data.amount)

    result = store.update_invoice(
        invoice_id, data.customer_id, amount_in_cents, data.status
    )
    if isinstance(result, Failure):
        return Result(State(message="Database Error: Failed to Update Invoice."))

    logger.info("Updated invoice %s (%s rows)", invoice_id, result.rowcount)
    return _finish(invalidate)


def delete_invoice(store, invalidate: Invalidate, invoice_id: str) -> Outcome:
    result = store.delete_invoice(invoice_id)
    if isinstance(result, Failure):
        return Result(State(message="Database Error: Failed to Delete Invoice."))

    logger.info("Deleted invoice %s (%s rows)", invoice_id, result.rowcount)
    return _finish(invalidate)
