from flask import jsonify, request, current_app

from modules.orders.serializers import movement_to_dict
from modules.users.context import require_user
from . import warehouse_bp
from .services import list_movements


warehouse_bp.before_request(require_user)


# ---------- MOVEMENT LEDGER ----------

@warehouse_bp.route("/movements", methods=["GET"], endpoint="movements")
def movements():
    """
    Stock movement ledger, newest first.
    - orderId: only movements booked by this order
    - limit: at most this many rows (default 200)
    """
    order_id = request.args.get("orderId", type=int)
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, current_app.config.get("ORDERS_PAGE_LIMIT_MAX", 100) * 5))

    rows = list_movements(order_id=order_id, limit=limit)
    return jsonify([movement_to_dict(m) for m in rows])
