from urllib.parse import urlparse

from flask import Blueprint, current_app, jsonify, redirect, request, url_for
from flask_login import current_user, login_required, logout_user

from invoice_dashboard import limiter
from invoice_dashboard.auth import authenticate

auth = Blueprint("auth", __name__)


def _safe_next(target):
    """Return ``target`` if it is a local path, otherwise ``None``."""
    if not target:
        return None
    cleaned = target.replace("\\", "")
    parsed = urlparse(cleaned)
    if parsed.scheme or parsed.netloc or not cleaned.startswith("/"):
        return None
    return cleaned


@auth.route("/login", methods=["GET", "POST"])
@limiter.limit("5 per minute", methods=["POST"])
def login():
    """Authenticate a user and start their session."""
    if current_user.is_authenticated:
        return redirect(url_for("main.dashboard"))

    if request.method == "POST":
        error = authenticate(None, request.form)
        if error is not None:
            return jsonify({"message": error}), 401
        target = _safe_next(request.args.get("next"))
        return redirect(target or url_for("main.dashboard"))

    return jsonify(
        {
            "message": None,
            "demo": current_app.config["DEMO"],
            "next": _safe_next(request.args.get("next")),
        }
    )


@auth.route("/logout", methods=["GET", "POST"])
@login_required
def logout():
    """Log the current user out."""
    user_id = current_user.get_id()
    logout_user()
    current_app.logger.info("Signed out user %s", user_id)
    return redirect(url_for("auth.login"))
