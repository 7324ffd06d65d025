# =============================================================================
# ORDER FACTORIES
# =============================================================================
# camelCase payloads as the dashboard posts them, and the snake_case dicts
# the forms hand to modules.orders.services
# =============================================================================

import factory
from datetime import date, datetime, timedelta
from decimal import Decimal


class ProductLinePayloadFactory(factory.Factory):
    """One entry of the ``products`` array of POST /orders."""

    class Meta:
        model = dict

    productId = 1
    quantity = 5
    unitPrice = 12.5
    notes = ""


class OrderPayloadFactory(factory.Factory):
    """JSON body of POST /orders; ``products`` must be supplied."""

    class Meta:
        model = dict

    dueDate = factory.LazyFunction(lambda: (date.today() + timedelta(days=7)).isoformat())
    priority = "MEDIUM"
    customerNote = factory.Sequence(lambda n: f"Customer note {n}")
    description = "Spring collection"
    products = factory.LazyFunction(list)


class ProductLineDataFactory(factory.Factory):
    class Meta:
        model = dict

    product_id = 1
    quantity = 5
    unit_price = Decimal("12.50")
    notes = None


class OrderDataFactory(factory.Factory):
    """Validated form data as passed to create_order / update_order."""

    class Meta:
        model = dict

    due_date = factory.LazyFunction(lambda: datetime.utcnow() + timedelta(days=7))
    priority = "MEDIUM"
    customer_note = factory.Sequence(lambda n: f"Customer note {n}")
    description = "Spring collection"
    products = factory.LazyFunction(list)
