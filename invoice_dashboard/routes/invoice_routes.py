from flask import Blueprint, current_app, jsonify, redirect, request
from flask_login import login_required

from invoice_dashboard import actions
from invoice_dashboard.actions import Redirect
from invoice_dashboard.store import Failure
from invoice_dashboard.utils.numeric import format_currency
from invoice_dashboard.utils.revalidate import revalidate_path

invoice = Blueprint("invoice", __name__, url_prefix="/dashboard/invoices")


def _store():
    return current_app.extensions["invoice_store"]


def _respond(outcome):
    """Turn an action outcome into an HTTP response."""
    if isinstance(outcome, Redirect):
        return redirect(outcome.path)
    state = outcome.state
    status = 400 if state.errors else 500
    return jsonify(state.to_dict()), status


def invoice_rows(store):
    """Return the invoice listing, or ``None`` if the store failed."""
    result = store.list_invoices()
    if isinstance(result, Failure):
        return None
    return [
        {
            "id": row["id"],
            "customer_id": row["customer_id"],
            "name": row["name"],
            "email": row["email"],
            "amount": row["amount"],
            "amount_display": format_currency(row["amount"]),
            "status": row["status"],
            "date": row["date"],
        }
        for row in result.rows
    ]


@invoice.route("", methods=["GET"])
@login_required
def view_invoices():
    """List invoices, newest first."""
    cache = current_app.extensions["view_cache"]
    rows = cache.get_or_compute(request.path, lambda: invoice_rows(_store()))
    if rows is None:
        return jsonify({"message": "Failed to fetch invoices."}), 500
    return jsonify({"invoices": rows})


@invoice.route("/create", methods=["POST"])
@login_required
def create_invoice():
    """Create an invoice from the submitted form."""
    outcome = actions.create_invoice(
        _store(), revalidate_path, None, request.form
    )
    return _respond(outcome)


@invoice.route("/<invoice_id>/edit", methods=["POST"])
@login_required
def update_invoice(invoice_id):
    """Update an invoice from the submitted form."""
    outcome = actions.update_invoice(
        _store(), revalidate_path, invoice_id, None, request.form
    )
    return _respond(outcome)


@invoice.route("/<invoice_id>/delete", methods=["POST"])
@login_required
def delete_invoice(invoice_id):
    """Delete an invoice."""
    outcome = actions.delete_invoice(_store(), revalidate_path, invoice_id)
    return _respond(outcome)
