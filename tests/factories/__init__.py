# =============================================================================
# TEST FACTORIES
# =============================================================================
# Factory Boy factories for order payloads (API) and order data (services)
# =============================================================================

from .orders import (
    OrderDataFactory,
    OrderPayloadFactory,
    ProductLineDataFactory,
    ProductLinePayloadFactory,
)

__all__ = [
    "OrderDataFactory",
    "OrderPayloadFactory",
    "ProductLineDataFactory",
    "ProductLinePayloadFactory",
]
