import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, Response, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect
from flask_wtf.csrf import CSRFError

load_dotenv()
db = SQLAlchemy()
login_manager = LoginManager()
login_manager.login_view = "auth.login"
storage_uri = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
limiter = Limiter(key_func=get_remote_address, storage_uri=storage_uri)
csrf = CSRFProtect()


def _get_bool_env(var_name: str, default: bool = False) -> bool:
    """Return a boolean environment variable value."""

    value = os.getenv(var_name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DEFAULT_CSP = (
    "default-src 'self'; "
    "frame-ancestors 'self'; "
    "form-action 'self'; "
    "object-src 'none'; "
    "base-uri 'self'"
)
POSTGRES_SCHEMES = ("postgres://", "postgresql://")


def database_uri(url: str) -> str:
    """Return a SQLAlchemy URI for the ``POSTGRES_URL`` connection string.

    Hosted Postgres providers hand out ``postgres://`` URLs, which SQLAlchemy
    no longer accepts, and bare ``postgresql://`` URLs would select the
    psycopg2 driver.  Both are rewritten to the psycopg 3 dialect; any other
    URL (e.g. ``sqlite:///`` in tests) is returned untouched.
    """

    for scheme in POSTGRES_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+psycopg://" + url[len(scheme):]
    return url


@login_manager.user_loader
def load_user(user_id):
    """Reload the signed-in user through the configured verifier."""
    verifier = current_app.extensions["credential_verifier"]
    return verifier.load(user_id)


def create_app(args: list, verifier=None):
    """Application factory used by Flask.

    ``verifier`` overrides the credential backend selected by the
    ``CREDENTIALS_BACKEND`` environment variable.
    """
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    default_secure_cookies = "--demo" not in args
    session_cookie_secure = _get_bool_env(
        "SESSION_COOKIE_SECURE", default=default_secure_cookies
    )
    enforce_https = _get_bool_env("ENFORCE_HTTPS", default=False)
    app.config["ENFORCE_HTTPS"] = enforce_https
    app.config.update(
        SESSION_COOKIE_SECURE=session_cookie_secure,
        REMEMBER_COOKIE_SECURE=session_cookie_secure,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=timedelta(minutes=30),
    )
    app.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    raw_url = os.getenv("POSTGRES_URL")
    if not raw_url:
        raise RuntimeError("POSTGRES_URL environment variable not set")
    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri(raw_url)
    if raw_url.startswith(POSTGRES_SCHEMES):
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "connect_args": {
                "sslmode": os.getenv("POSTGRES_SSLMODE", "require")
            },
            "pool_pre_ping": True,
        }

    app.config["DEMO"] = "--demo" in args
    app.config["RATELIMIT_ENABLED"] = _get_bool_env(
        "RATELIMIT_ENABLED", default=True
    )

    db.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)
    csrf.init_app(app)

    from invoice_dashboard.auth import build_verifier
    from invoice_dashboard.store import InvoiceStore
    from invoice_dashboard.utils.revalidate import ViewCache

    # Constructed once per process and handed to the actions by the routes.
    app.extensions["invoice_store"] = InvoiceStore(db)
    app.extensions["credential_verifier"] = verifier or build_verifier(
        os.getenv("CREDENTIALS_BACKEND", "fixed")
    )
    app.extensions["view_cache"] = ViewCache()

    @app.after_request
    def apply_security_headers(response):
        """Attach standard security headers to every response."""
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if request.is_secure or app.config.get("ENFORCE_HTTPS", False):
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        response.headers.setdefault(
            "Content-Security-Policy",
            app.config.get("CONTENT_SECURITY_POLICY", DEFAULT_CSP),
        )
        return response

    @app.before_request
    def block_http_options():
        """Return a 405 for HTTP OPTIONS requests to reduce information leakage."""
        if request.method == "OPTIONS":
            return Response(status=405)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        """Explain a rejected form post instead of a bare 400."""
        return jsonify({"message": error.description}), 400

    with app.app_context():
        # Create the schema on start so a fresh database is usable without
        # running the seed script first.
        from . import models  # noqa: F401

        db.create_all()

        from invoice_dashboard.routes.auth_routes import auth
        from invoice_dashboard.routes.invoice_routes import invoice
        from invoice_dashboard.routes.main_routes import main
        from invoice_dashboard.routes.query_routes import query

        app.register_blueprint(auth)
        app.register_blueprint(main)
        app.register_blueprint(invoice)
        app.register_blueprint(query)

    return app
