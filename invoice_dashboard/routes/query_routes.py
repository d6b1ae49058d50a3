from flask import Blueprint, current_app, jsonify

from invoice_dashboard.store import Failure

query = Blueprint("query", __name__)


@query.route("/query")
def list_invoices():
    """Diagnostic join of invoices and customers for a fixed amount."""
    store = current_app.extensions["invoice_store"]
    result = store.invoices_with_amount()
    if isinstance(result, Failure):
        current_app.logger.error("Database Error: %s", result.detail)
        return (
            jsonify(
                {"message": "Failed to fetch invoices.", "error": result.detail}
            ),
            500,
        )
    return jsonify(
        [{"amount": row["amount"], "name": row["name"]} for row in result.rows]
    )
