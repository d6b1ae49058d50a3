import os

from werkzeug.security import generate_password_hash

from invoice_dashboard import create_app, db
from invoice_dashboard.models import Customer, Invoice, User

CUSTOMERS = [
    {
        "id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
        "name": "Evil Rabbit",
        "email": "evil@rabbit.com",
        "image_url": "/customers/evil-rabbit.png",
    },
    {
        "id": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
        "name": "Delba de Oliveira",
        "email": "delba@oliveira.com",
        "image_url": "/customers/delba-de-oliveira.png",
    },
    {
        "id": "3958dc9e-742f-4377-85e9-fec4b6a6442a",
        "name": "Lee Robinson",
        "email": "lee@robinson.com",
        "image_url": "/customers/lee-robinson.png",
    },
]

# Amounts are in cents.
INVOICES = [
    (CUSTOMERS[0]["id"], 15795, "pending", "2022-12-06"),
    (CUSTOMERS[1]["id"], 20348, "pending", "2022-11-14"),
    (CUSTOMERS[2]["id"], 3040, "paid", "2022-10-29"),
    (CUSTOMERS[0]["id"], 44800, "paid", "2023-09-10"),
    (CUSTOMERS[1]["id"], 666, "pending", "2023-06-27"),
    (CUSTOMERS[2]["id"], 32545, "paid", "2023-06-09"),
]


def seed_initial_data() -> None:
    """Seed the database with sample customers, invoices and a user."""
    app = create_app([])
    with app.app_context():
        for data in CUSTOMERS:
            if db.session.get(Customer, data["id"]) is None:
                db.session.add(Customer(**data))

        if Invoice.query.count() == 0:
            for customer_id, amount, status, issued in INVOICES:
                db.session.add(
                    Invoice(
                        customer_id=customer_id,
                        amount=amount,
                        status=status,
                        date=issued,
                    )
                )

        email = os.getenv("SEED_USER_EMAIL", "user@nextmail.com")
        if User.query.filter_by(email=email).first() is None:
            db.session.add(
                User(
                    name=os.getenv("SEED_USER_NAME", "User"),
                    email=email,
                    password=generate_password_hash(
                        os.getenv("SEED_USER_PASSWORD", "123456")
                    ),
                )
            )

        db.session.commit()
        print("Sample customers, invoices and user created.")


if __name__ == "__main__":
    seed_initial_data()
