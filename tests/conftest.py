# =============================================================================
# TEST CONFIGURATION
# =============================================================================
# Global fixtures: in-memory application, seeded reference data, API client
# =============================================================================

import pytest
from decimal import Decimal

from app import create_app
from config import TestConfig
from extensions import db
from modules.orders import services
from modules.reference.contacts.models import Contact
from modules.reference.products.models import Product
from modules.users.models import User

from factories import OrderDataFactory, ProductLineDataFactory


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest.fixture
def app():
    """
    Fresh application over an empty in-memory SQLite database.
    The app context stays pushed for the whole test, so services can be
    called directly and the test client shares the same session.
    """
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    u = User(name="Test Manager", email="manager@example.com")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def auth_headers(user):
    """Caller identity header accepted by every blueprint."""
    return {"X-User-Id": str(user.id)}


# =============================================================================
# REFERENCE DATA
# =============================================================================

@pytest.fixture
def workers(app):
    """
    Two active workers (inserted out of name order), one disabled worker
    and an active contact that is not a worker.
    """
    contacts = {
        "bella": Contact(name="Bella Ortiz", contact_type="WORKER", phone="+380501112233"),
        "aisha": Contact(name="Aisha Rahman", contact_type="WORKER", whatsapp_phone="+380671234567"),
        "retired": Contact(name="Zara Old", contact_type="WORKER", is_active=False),
        "supplier": Contact(name="Fabric Supplier Ltd", contact_type="SUPPLIER"),
    }
    db.session.add_all(contacts.values())
    db.session.commit()
    return contacts


@pytest.fixture
def products(app):
    items = [
        Product(name="Hijab Square Voal", code="HJ-SQ", price=Decimal("120.00"), qty_on_hand=10.0),
        Product(name="Hijab Pashmina Ceruti", code="HJ-PS", price=Decimal("150.00"),
                qty_on_hand=0.0, material_id=7, unit="pcs"),
        Product(name="Inner Ninja", code="IN-NJ", price=Decimal("45.00"), qty_on_hand=3.0),
    ]
    db.session.add_all(items)
    db.session.commit()
    return items


# =============================================================================
# ORDER HELPERS
# =============================================================================

@pytest.fixture
def make_order(user, products):
    """
    Creates an order through the service. Default lines: 5 x product 0 at
    12.50 and 7 x product 1 without a price.
    """
    def _make(**overrides):
        data = OrderDataFactory(products=[
            ProductLineDataFactory(product_id=products[0].id, quantity=5, unit_price=Decimal("12.50")),
            ProductLineDataFactory(product_id=products[1].id, quantity=7, unit_price=None, notes="rush"),
        ])
        data.update(overrides)
        return services.create_order(data, user.id)

    return _make
