# scripts/seed_demo.py

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import create_app
from extensions import db
from modules.users.models import User
from modules.reference.contacts.models import Contact
from modules.reference.products.models import Product

app = create_app()

USERS = [
    {"name": "Admin", "email": "admin@example.com"},
]

WORKERS = [
    {"name": "Aisha Rahman", "phone": "+380501112233", "whatsapp_phone": "+380501112233"},
    {"name": "Olena Koval", "phone": "+380671234567"},
    {"name": "Siti Nur", "email": "siti@example.com"},
]

PRODUCTS = [
    {"name": "Hijab Square Voal", "code": "HJ-SQ-VOAL", "category": "Hijab", "price": 120},
    {"name": "Hijab Pashmina Ceruti", "code": "HJ-PS-CERUTI", "category": "Hijab", "price": 150},
    {"name": "Inner Ninja", "code": "IN-NINJA", "category": "Inner", "price": 45},
]

with app.app_context():
    for data in USERS:
        if not User.query.filter_by(email=data["email"]).first():
            db.session.add(User(**data))

    for data in WORKERS:
        if not Contact.query.filter_by(name=data["name"], contact_type="WORKER").first():
            db.session.add(Contact(contact_type="WORKER", **data))

    for data in PRODUCTS:
        if not Product.query.filter_by(code=data["code"]).first():
            db.session.add(Product(**data))

    db.session.commit()
    print(f"✅ Seeded: {User.query.count()} users, "
          f"{Contact.active_workers().count()} workers, "
          f"{Product.query.count()} products.")
