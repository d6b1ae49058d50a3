from flask import Blueprint, current_app, jsonify, redirect, request, url_for
from flask_login import current_user, login_required

from invoice_dashboard.store import Failure
from invoice_dashboard.utils.numeric import format_currency

main = Blueprint("main", __name__)


def dashboard_summary(store):
    """Return the dashboard card figures, or ``None`` if the store failed."""
    result = store.summary()
    if isinstance(result, Failure):
        return None
    row = result.rows[0]
    return {
        "invoice_count": int(row["invoice_count"]),
        "customer_count": int(row["customer_count"]),
        "total_paid_cents": int(row["total_paid"]),
        "total_pending_cents": int(row["total_pending"]),
        "total_paid": format_currency(row["total_paid"]),
        "total_pending": format_currency(row["total_pending"]),
    }


@main.route("/")
def home():
    """Send visitors to the dashboard, or to sign in first."""
    if current_user.is_authenticated:
        return redirect(url_for("main.dashboard"))
    return redirect(url_for("auth.login"))


@main.route("/dashboard")
@login_required
def dashboard():
    """Return the aggregated dashboard figures."""
    store = current_app.extensions["invoice_store"]
    cache = current_app.extensions["view_cache"]
    summary = cache.get_or_compute(
        request.path, lambda: dashboard_summary(store)
    )
    if summary is None:
        return jsonify({"message": "Failed to fetch card data."}), 500
    return jsonify({"user": current_user.name, "summary": summary})
