"""Utility helpers shared across the test-suite."""

from __future__ import annotations

from invoice_dashboard import db
from invoice_dashboard.models import Invoice
from invoice_dashboard.store import Ok


def login(client, email: str = "test@test.com", password: str = "123456"):
    """Sign in through the login endpoint without following the redirect."""

    return client.post("/login", data={"email": email, "password": password})


def add_invoice(app, customer_id: str, amount: int, status: str = "pending", issued: str = "2024-01-15"):
    """Insert an invoice row directly and return its id."""

    with app.app_context():
        row = Invoice(
            customer_id=customer_id, amount=amount, status=status, date=issued
        )
        db.session.add(row)
        db.session.commit()
        return row.id


class FakeStore:
    """Records store calls and answers each with ``result``."""

    def __init__(self, result=None):
        self.result = result if result is not None else Ok(rowcount=1)
        self.calls = []

    def insert_invoice(self, *args):
        self.calls.append(("insert", args))
        return self.result

    def update_invoice(self, *args):
        self.calls.append(("update", args))
        return self.result

    def delete_invoice(self, *args):
        self.calls.append(("delete", args))
        return self.result

    def invoices_with_amount(self, *args):
        self.calls.append(("query", args))
        return self.result


class Invalidations(list):
    """Callable stand-in for ``revalidate_path`` that remembers paths."""

    def __call__(self, path: str) -> None:
        self.append(path)
