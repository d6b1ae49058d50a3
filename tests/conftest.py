from __future__ import annotations

import os
import sys

import pytest

from invoice_dashboard import create_app, db
from invoice_dashboard.models import Customer

# Ensure the package is importable when tests change directories
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, BASE_DIR)


@pytest.fixture
def app(tmp_path, monkeypatch):
    os.environ.setdefault("SECRET_KEY", "testsecret")
    monkeypatch.setenv("RATELIMIT_ENABLED", "false")
    monkeypatch.delenv("CREDENTIALS_BACKEND", raising=False)

    # Ensure a clean database for each test within the temp directory
    db_path = tmp_path / "invoices.db"
    monkeypatch.setenv("POSTGRES_URL", f"sqlite:///{db_path}")

    app = create_app(["--demo"])
    app.config.update({"TESTING": True, "WTF_CSRF_ENABLED": False})

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer(app):
    """A single customer row; returns its id."""
    with app.app_context():
        row = Customer(
            id="c1",
            name="Evil Rabbit",
            email="evil@rabbit.com",
            image_url="/customers/evil-rabbit.png",
        )
        db.session.add(row)
        db.session.commit()
        return row.id
