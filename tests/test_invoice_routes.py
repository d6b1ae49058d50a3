from datetime import datetime, timezone

from invoice_dashboard import db
from invoice_dashboard.forms import AMOUNT_MESSAGE, CUSTOMER_MESSAGE
from invoice_dashboard.models import Invoice
from invoice_dashboard.store import Failure
from tests.utils import FakeStore, add_invoice, login


def test_dashboard_requires_login(client):
    for path in ("/dashboard", "/dashboard/invoices"):
        resp = client.get(path)
        assert resp.status_code == 302
        assert "/login" in resp.headers["Location"]


def test_actions_require_login(client, app, customer):
    resp = client.post(
        "/dashboard/invoices/create",
        data={"customerId": customer, "amount": "45.00", "status": "paid"},
    )
    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]
    with app.app_context():
        assert Invoice.query.count() == 0


def test_create_invoice_flow(client, app, customer):
    login(client)
    resp = client.post(
        "/dashboard/invoices/create",
        data={"customerId": customer, "amount": "45.00", "status": "paid"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/invoices")

    with app.app_context():
        invoice = Invoice.query.one()
        assert invoice.customer_id == customer
        assert invoice.amount == 4500
        assert invoice.status == "paid"
        assert invoice.date == datetime.now(timezone.utc).date().isoformat()

    resp = client.get("/dashboard/invoices")
    rows = resp.get_json()["invoices"]
    assert [r["amount_display"] for r in rows] == ["$45.00"]
    assert rows[0]["name"] == "Evil Rabbit"


def test_create_invoice_validation_errors(client, app):
    login(client)
    resp = client.post(
        "/dashboard/invoices/create", data={"amount": "0", "status": "paid"}
    )
    assert resp.status_code == 400
    assert resp.get_json() == {
        "errors": {
            "customerId": [CUSTOMER_MESSAGE],
            "amount": [AMOUNT_MESSAGE],
        },
        "message": "Missing Fields. Failed to Create Invoice.",
    }
    with app.app_context():
        assert Invoice.query.count() == 0


def test_update_invoice_keeps_id_and_date(client, app, customer):
    invoice_id = add_invoice(app, customer, 1000, "pending", "2023-02-01")
    login(client)
    resp = client.post(
        f"/dashboard/invoices/{invoice_id}/edit",
        data={"customerId": customer, "amount": "12.34", "status": "paid"},
    )
    assert resp.status_code == 302
    with app.app_context():
        invoice = db.session.get(Invoice, invoice_id)
        assert invoice.amount == 1234
        assert invoice.status == "paid"
        assert invoice.date == "2023-02-01"


def test_update_unknown_invoice_still_redirects(client, app, customer):
    login(client)
    resp = client.post(
        "/dashboard/invoices/does-not-exist/edit",
        data={"customerId": customer, "amount": "5", "status": "paid"},
    )
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard/invoices")
    with app.app_context():
        assert Invoice.query.count() == 0


def test_delete_invoice_existing_and_missing(client, app, customer):
    invoice_id = add_invoice(app, customer, 1000)
    login(client)
    resp = client.post(f"/dashboard/invoices/{invoice_id}/delete")
    assert resp.status_code == 302
    resp = client.post(f"/dashboard/invoices/{invoice_id}/delete")
    assert resp.status_code == 302
    with app.app_context():
        assert Invoice.query.count() == 0


def test_store_failure_is_reported_as_server_error(client, app):
    app.extensions["invoice_store"] = FakeStore(Failure(RuntimeError("down")))
    login(client)
    resp = client.post("/dashboard/invoices/x/delete")
    assert resp.status_code == 500
    assert resp.get_json() == {
        "errors": {},
        "message": "Database Error: Failed to Delete Invoice.",
    }


def test_listing_is_cached_until_revalidated(client, app, customer):
    login(client)
    cache = app.extensions["view_cache"]
    assert client.get("/dashboard/invoices").get_json() == {"invoices": []}
    assert "/dashboard/invoices" in cache

    # Rows written behind the cache's back stay invisible
    add_invoice(app, customer, 700)
    assert client.get("/dashboard/invoices").get_json() == {"invoices": []}

    client.post(
        "/dashboard/invoices/create",
        data={"customerId": customer, "amount": "1", "status": "pending"},
    )
    assert "/dashboard/invoices" not in cache
    rows = client.get("/dashboard/invoices").get_json()["invoices"]
    assert sorted(r["amount"] for r in rows) == [100, 700]


def test_dashboard_summary(client, app, customer):
    add_invoice(app, customer, 1000, "paid")
    add_invoice(app, customer, 250, "pending")
    login(client)
    summary = client.get("/dashboard").get_json()["summary"]
    assert summary == {
        "invoice_count": 2,
        "customer_count": 1,
        "total_paid_cents": 1000,
        "total_pending_cents": 250,
        "total_paid": "$10.00",
        "total_pending": "$2.50",
    }
    client.post("/dashboard/invoices/x/delete")
    assert "/dashboard" not in app.extensions["view_cache"]


def test_home_redirects(client):
    resp = client.get("/")
    assert resp.headers["Location"].endswith("/login")
    login(client)
    resp = client.get("/")
    assert resp.headers["Location"].endswith("/dashboard")
