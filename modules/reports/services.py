# modules/reports/services.py
from sqlalchemy.orm import joinedload, selectinload

from modules.orders.filters import build_conditions, build_ordering
from modules.orders.models import Order, OrderProduct

DATE_FMT = "%Y-%m-%d"


def _fmt_date(dt, empty=""):
    return dt.strftime(DATE_FMT) if dt else empty


def _flatten(order):
    """One report row per (order, product line); an order without lines gives one placeholder row."""
    base = {
        "orderNumber": order.order_number,
        "orderStatus": order.status,
        "priority": order.priority,
        "tailorName": order.worker_contact.name if order.worker_contact else "Not Assigned",
        "dueDate": _fmt_date(order.due_date, "No due date"),
        "customerNote": order.customer_note or "",
        "createdAt": _fmt_date(order.created_at),
    }
    if not order.lines:
        return [{
            **base,
            "productName": "No Products",
            "productCode": "N/A",
            "quantity": 0,
            "completedQty": 0,
        }]

    return [
        {
            **base,
            "productName": line.product.name if line.product else f"#{line.product_id}",
            "productCode": (line.product.code if line.product else None) or "N/A",
            "quantity": line.quantity or 0,
            "completedQty": line.completed_qty or 0,
        }
        for line in order.lines
    ]


def describe_filters(status=None, priority=None, search=None, date_from=None, date_to=None):
    parts = [
        f"Status={status}" if status else "All Status",
        f"Priority={priority}" if priority else "All Priority",
    ]
    if search:
        parts.append(f'Search="{search}"')
    if date_from:
        parts.append(f"From={_fmt_date(date_from)}")
    if date_to:
        parts.append(f"To={_fmt_date(date_to)}")
    return "Filters: " + " ".join(parts)


def build_report(status=None, priority=None, search=None, date_from=None, date_to=None,
                 sort_by=None, sort_order=None):
    """
    All active orders matching the list filters plus an inclusive created_at
    range, without pagination, flattened for the tabular export.
    Returns: {rows, summary: {totalOrders, totalRows, totalQuantity, totalCompleted}, filterText}
    """
    status = status if status and status.lower() != "all" else None
    priority = priority if priority and priority.lower() != "all" else None

    conds = build_conditions(
        status=status, priority=priority, search=search,
        date_from=date_from, date_to=date_to,
    )
    orders = (
        Order.query.options(
            joinedload(Order.worker_contact),
            selectinload(Order.lines).joinedload(OrderProduct.product),
        )
        .filter(*conds)
        .order_by(*build_ordering(sort_by, sort_order))
        .all()
    )

    rows = []
    for order in orders:
        rows.extend(_flatten(order))

    return {
        "rows": rows,
        "summary": {
            "totalOrders": len(orders),
            "totalRows": len(rows),
            "totalQuantity": sum(r["quantity"] for r in rows),
            "totalCompleted": sum(r["completedQty"] for r in rows),
        },
        "filterText": describe_filters(status, priority, search, date_from, date_to),
    }
