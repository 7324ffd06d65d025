# modules/orders/filters.py
"""
Predicate construction shared by the orders list and the PDF report.
Unmatched filters simply produce an empty result, never an error.
"""
from datetime import datetime, time

from sqlalchemy import or_

from exceptions import ValidationError
from .models import Order

# request field -> column
SORT_FIELDS = {
    "createdAt": Order.created_at,
    "updatedAt": Order.updated_at,
    "dueDate": Order.due_date,
    "orderNumber": Order.order_number,
    "status": Order.status,
    "priority": Order.priority,
    "targetPcs": Order.target_pcs,
}

DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


def _is_set(value) -> bool:
    return bool(value) and str(value).strip().lower() != "all"


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(status=None, priority=None, search=None, date_from=None, date_to=None):
    """
    Returns a list of SQLAlchemy conditions over Order:
      - only active (not soft-deleted) orders
      - status / priority equality (values "all" or empty are ignored)
      - search: case-insensitive substring of order number, customer note or description
      - date_from / date_to: inclusive range on created_at (whole days)
    """
    conds = [Order.is_active.is_(True)]

    if _is_set(status):
        conds.append(Order.status == str(status).strip().upper())
    if _is_set(priority):
        conds.append(Order.priority == str(priority).strip().upper())

    search = (search or "").strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        conds.append(or_(
            Order.order_number.ilike(pattern, escape="\\"),
            Order.customer_note.ilike(pattern, escape="\\"),
            Order.description.ilike(pattern, escape="\\"),
        ))

    if date_from:
        conds.append(Order.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        conds.append(Order.created_at <= datetime.combine(date_to, time.max))

    return conds


def build_ordering(sort_by=None, sort_order=None):
    sort_by = sort_by or DEFAULT_SORT_BY
    column = SORT_FIELDS.get(sort_by)
    if column is None:
        raise ValidationError(
            "Invalid sortBy. Must be one of: " + ", ".join(SORT_FIELDS),
            extra={"field": "sortBy"},
        )

    direction = (sort_order or DEFAULT_SORT_ORDER).strip().lower()
    if direction not in ("asc", "desc"):
        raise ValidationError("Invalid sortOrder. Must be one of: asc, desc", extra={"field": "sortOrder"})

    # id as tie-breaker keeps pages stable for equal sort keys
    if direction == "asc":
        return [column.asc(), Order.id.asc()]
    return [column.desc(), Order.id.desc()]
