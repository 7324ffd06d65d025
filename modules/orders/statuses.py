# modules/orders/statuses.py
from enum import Enum

from exceptions import ValidationError


class OrderStatus(str, Enum):
    CREATED = "CREATED"
    NEED_MATERIAL = "NEED_MATERIAL"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Production states that cannot be soft-deleted any more
PROTECTED_STATUSES = frozenset({
    OrderStatus.PROCESSING,
    OrderStatus.COMPLETED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})

DELETABLE_STATUSES = tuple(s for s in OrderStatus if s not in PROTECTED_STATUSES)

# previous status -> statuses allowed next; every pair is allowed for now
TRANSITIONS = {
    status: frozenset(OrderStatus)
    for status in OrderStatus
}


def _values(enum_cls):
    return [member.value for member in enum_cls]


def parse_status(value) -> OrderStatus:
    """Case-insensitive lookup; ValidationError lists the accepted values."""
    try:
        return OrderStatus((value or "").strip().upper())
    except (ValueError, AttributeError):
        raise ValidationError(
            "Invalid status. Must be one of: " + ", ".join(_values(OrderStatus)),
            extra={"field": "status"},
        )


def parse_priority(value) -> OrderPriority:
    try:
        return OrderPriority((value or "").strip().upper())
    except (ValueError, AttributeError):
        raise ValidationError(
            "Invalid priority. Must be one of: " + ", ".join(_values(OrderPriority)),
            extra={"field": "priority"},
        )


def can_transition(previous: OrderStatus, new: OrderStatus) -> bool:
    return OrderStatus(new) in TRANSITIONS.get(OrderStatus(previous), frozenset())


def ensure_transition(previous, new):
    if not can_transition(previous, new):
        raise ValidationError(
            f"Cannot change status from {OrderStatus(previous).value} to {OrderStatus(new).value}",
            extra={"field": "status"},
        )


def can_delete(status) -> bool:
    return OrderStatus(status) not in PROTECTED_STATUSES


def ensure_deletable(status):
    if not can_delete(status):
        allowed = ", ".join(f"'{s.value}'" for s in DELETABLE_STATUSES)
        raise ValidationError(
            f"Cannot delete order with status: {OrderStatus(status).value}. "
            f"Only orders with status {allowed} can be deleted."
        )
