from flask import Blueprint

orders_bp = Blueprint(
    "orders",
    __name__,
    url_prefix="/orders"
)

# routes must be imported so the decorators attach to the blueprint
from . import routes  # noqa: E402,F401
