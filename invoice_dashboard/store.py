"""Invoice store: one parameterized statement per call, tagged results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from sqlalchemy import Select, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from invoice_dashboard.models import Customer, Invoice

logger = logging.getLogger(__name__)

# Amount used by the diagnostic query endpoint, in cents.
DIAGNOSTIC_AMOUNT = 666


@dataclass(frozen=True)
class Ok:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0


@dataclass(frozen=True)
class Failure:
    error: Exception

    @property
    def detail(self) -> str:
        return str(self.error) or "An unknown error occurred"


StoreResult = Union[Ok, Failure]


class InvoiceStore:
    """Executes invoice statements through a Flask-SQLAlchemy session.

    Built once by :func:`invoice_dashboard.create_app` and passed to the
    actions, so tests can hand the actions a fake with the same methods.
    Every method commits its single statement; database errors roll the
    session back and come back as :class:`Failure`.
    """

    def __init__(self, db) -> None:
        self.db = db

    def execute(self, statement) -> StoreResult:
        session = self.db.session
        try:
            result = session.execute(statement)
            if isinstance(statement, Select):
                rows = [dict(row) for row in result.mappings().all()]
                rowcount = len(rows)
            else:
                rows = []
                rowcount = result.rowcount
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database error while executing statement")
            return Failure(exc)
        except Exception:
            session.rollback()
            raise
        return Ok(rows=rows, rowcount=rowcount)

    def insert_invoice(
        self, customer_id: str, amount_in_cents: int, status: str, date: str
    ) -> StoreResult:
        return self.execute(
            insert(Invoice).values(
                customer_id=customer_id,
                amount=amount_in_cents,
                status=status,
                date=date,
            )
        )

    def update_invoice(
        self, invoice_id: str, customer_id: str, amount_in_cents: int, status: str
    ) -> StoreResult:
        return self.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount_in_cents, status=status)
        )

    def delete_invoice(self, invoice_id: str) -> StoreResult:
        return self.execute(delete(Invoice).where(Invoice.id == invoice_id))

    def invoices_with_amount(self, amount: int = DIAGNOSTIC_AMOUNT) -> StoreResult:
        """Return ``amount``/``name`` rows for invoices of exactly ``amount``."""
        return self.execute(
            select(Invoice.amount, Customer.name)
            .join(Customer, Invoice.customer_id == Customer.id)
            .where(Invoice.amount == amount)
        )

    def list_invoices(self) -> StoreResult:
        return self.execute(
            select(
                Invoice.id,
                Invoice.customer_id,
                Customer.name,
                Customer.email,
                Invoice.amount,
                Invoice.status,
                Invoice.date,
            )
            .join(Customer, Invoice.customer_id == Customer.id)
            .order_by(Invoice.date.desc(), Invoice.id)
        )

    def summary(self) -> StoreResult:
        """Return invoice/customer counts and paid/pending totals in cents."""
        return self.execute(
            select(
                select(func.count(Invoice.id))
                .scalar_subquery()
                .label("invoice_count"),
                select(func.count(Customer.id))
                .scalar_subquery()
                .label("customer_count"),
                _status_total("paid").label("total_paid"),
                _status_total("pending").label("total_pending"),
            )
        )


def _status_total(status: str):
    return (
        select(func.coalesce(func.sum(Invoice.amount), 0))
        .where(Invoice.status == status)
        .scalar_subquery()
    )
