# modules/orders/services.py
"""
Order lifecycle: listing, creation, partial update, status changes with
stock reconciliation, worker assignment, soft delete and timeline.

Services take plain dicts with snake_case keys (see forms.py) and raise
exceptions.AppError subclasses; routes turn results into JSON.
"""
import math
from datetime import datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from extensions import db
from exceptions import (
    ConflictError, InvalidProductsError, InvalidWorkerError, OrderNotFoundError, ValidationError,
)
from modules.reference.contacts.models import Contact
from modules.reference.products.models import Product
from modules.warehouse.services import receive_completed_order, list_movements

from .filters import build_conditions, build_ordering
from .models import Order, OrderProduct
from .serializers import worker_to_dict, movement_to_dict, user_to_dict
from .statuses import (
    OrderStatus, OrderPriority, parse_status, parse_priority, ensure_transition, ensure_deletable,
)

ORDER_NUMBER_PREFIX = "ORD-"


# ---------- HELPERS ----------

def _order_query():
    return Order.query.options(
        joinedload(Order.worker_contact),
        joinedload(Order.user),
        selectinload(Order.lines).joinedload(OrderProduct.product),
    )


def _get_active_order(order_id) -> Order:
    order = _order_query().filter(Order.id == order_id, Order.is_active.is_(True)).first()
    if order is None:
        raise OrderNotFoundError()
    return order


def _validate_worker(worker_contact_id):
    """None/0 means "no worker"; anything else must be an active WORKER contact."""
    if not worker_contact_id:
        return None
    worker = Contact.active_workers().filter(Contact.id == worker_contact_id).first()
    if worker is None:
        raise InvalidWorkerError()
    return worker


def _validate_products(lines):
    ids = {int(line["product_id"]) for line in lines}
    found = {
        pid for (pid,) in db.session.query(Product.id).filter(Product.id.in_(ids)).all()
    }
    missing = sorted(ids - found)
    if missing:
        raise InvalidProductsError(extra={"missingProductIds": missing})


def _build_lines(lines):
    out = []
    for line in lines:
        quantity = int(line["quantity"])
        unit_price = Decimal(str(line.get("unit_price") or 0))
        out.append(OrderProduct(
            product_id=int(line["product_id"]),
            quantity=quantity,
            unit_price=unit_price,
            total_price=unit_price * quantity,
            notes=(line.get("notes") or "").strip() or None,
            completed_qty=0,
            status="PENDING",
        ))
    return out


def _target_pcs(lines) -> int:
    return sum(int(line["quantity"] or 0) for line in lines)


def _format_order_number(n: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}{n:06d}"


def _order_count() -> int:
    # soft-deleted orders keep their numbers, so count all rows
    return db.session.query(func.count(Order.id)).scalar() or 0


def _is_order_number_clash(exc: IntegrityError) -> bool:
    return "order_number" in str(getattr(exc, "orig", exc))


def _clean_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# ---------- LIST / DETAILS ----------

def list_orders(page=1, limit=10, status=None, priority=None, search=None,
                sort_by=None, sort_order=None):
    """
    Page of active orders matching the filters.
    Returns {orders, pagination: {total, pages, current, limit},
             filters: {statusCounts, priorityCounts}}
    Badge counts are over all active orders, independent of the filters.
    """
    max_limit = current_app.config.get("ORDERS_PAGE_LIMIT_MAX", 100)
    page = max(1, int(page or 1))
    limit = max(1, min(int(limit or 10), max_limit))

    conds = build_conditions(status=status, priority=priority, search=search)
    ordering = build_ordering(sort_by, sort_order)

    total = db.session.query(func.count(Order.id)).filter(*conds).scalar() or 0
    orders = (
        Order.query.options(
            joinedload(Order.worker_contact),
            selectinload(Order.lines).joinedload(OrderProduct.product),
        )
        .filter(*conds)
        .order_by(*ordering)
        .limit(limit)
        .offset((page - 1) * limit)
        .all()
    )

    status_counts = dict(
        db.session.query(Order.status, func.count(Order.id))
        .filter(Order.is_active.is_(True))
        .group_by(Order.status)
        .all()
    )
    priority_counts = dict(
        db.session.query(Order.priority, func.count(Order.id))
        .filter(Order.is_active.is_(True))
        .group_by(Order.priority)
        .all()
    )

    return {
        "orders": orders,
        "pagination": {
            "total": total,
            "pages": math.ceil(total / limit),
            "current": page,
            "limit": limit,
        },
        "filters": {
            "statusCounts": status_counts,
            "priorityCounts": priority_counts,
        },
    }


def get_order(order_id) -> Order:
    return _get_active_order(order_id)


# ---------- CREATE / UPDATE ----------

def create_order(data: dict, user_id: int) -> Order:
    """
    Creates an order with its product lines in one transaction.

    Order number is count()+1 guarded by the unique constraint: on a clash
    the transaction is rolled back and the next number is tried, up to
    ORDER_NUMBER_ATTEMPTS times.
    """
    if not data.get("due_date"):
        raise ValidationError("Due date is required", extra={"field": "dueDate"})
    lines = data.get("products") or []
    if not lines:
        raise ValidationError("At least one product is required", extra={"field": "products"})

    priority = parse_priority(data.get("priority") or OrderPriority.MEDIUM.value)
    status = parse_status(data.get("status") or OrderStatus.CREATED.value)
    worker = _validate_worker(data.get("worker_contact_id"))
    worker_id = worker.id if worker else None
    _validate_products(lines)

    attempts = current_app.config.get("ORDER_NUMBER_ATTEMPTS", 3)
    for attempt in range(1, attempts + 1):
        now = datetime.utcnow()
        order_number = _format_order_number(_order_count() + attempt)
        order = Order(
            order_number=order_number,
            customer_note=_clean_text(data.get("customer_note")),
            description=_clean_text(data.get("description")),
            due_date=data["due_date"],
            priority=priority.value,
            status=status.value,
            target_pcs=_target_pcs(lines),
            completed_pcs=0,
            worker_contact_id=worker_id,
            user_id=user_id,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        order.lines = _build_lines(lines)
        db.session.add(order)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if not _is_order_number_clash(e):
                raise
            current_app.logger.warning(
                f"Order number {order_number} already taken (attempt {attempt}/{attempts})"
            )
            continue
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Order {order_number} created by user {user_id}")
        return _get_active_order(order.id)

    raise ConflictError("Could not allocate a unique order number, please retry")


def update_order(order_id, data: dict) -> Order:
    """
    Partial update: only keys present in ``data`` overwrite the order.
    A non-empty products list replaces every line and recomputes target_pcs;
    the whole change is one transaction.
    """
    order = _get_active_order(order_id)

    if "worker_contact_id" in data:
        _validate_worker(data["worker_contact_id"])

    lines = data.get("products") or []
    if lines:
        _validate_products(lines)

    new_status = None
    if data.get("status"):
        new_status = parse_status(data["status"])
        ensure_transition(order.status, new_status)

    new_priority = parse_priority(data["priority"]) if data.get("priority") else None

    try:
        if "customer_note" in data:
            order.customer_note = _clean_text(data["customer_note"])
        if "description" in data:
            order.description = _clean_text(data["description"])
        if data.get("due_date"):
            order.due_date = data["due_date"]
        if new_priority is not None:
            order.priority = new_priority.value
        if new_status is not None:
            order.status = new_status.value
        if "worker_contact_id" in data:
            order.worker_contact_id = data["worker_contact_id"] or None

        if lines:
            # delete-orphan cascade removes the previous lines on flush
            order.lines = _build_lines(lines)
            order.target_pcs = _target_pcs(lines)
            order.completed_pcs = 0

        order.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return _get_active_order(order_id)


def update_line_progress(order_id, line_id, completed_qty) -> Order:
    """
    Records how many pieces of one product line are finished and keeps
    order.completed_pcs equal to the sum over its lines.
    """
    order = _get_active_order(order_id)
    line = next((ln for ln in order.lines if ln.id == line_id), None)
    if line is None:
        raise ValidationError(f"Order {order.order_number} has no product line {line_id}")

    completed_qty = int(completed_qty)
    if completed_qty < 0 or completed_qty > line.quantity:
        raise ValidationError(
            f"completedQty must be between 0 and {line.quantity}",
            extra={"field": "completedQty"},
        )

    try:
        line.completed_qty = completed_qty
        if completed_qty == 0:
            line.status = "PENDING"
        elif completed_qty < line.quantity:
            line.status = "IN_PROGRESS"
        else:
            line.status = "COMPLETED"
        order.completed_pcs = sum(ln.completed_qty or 0 for ln in order.lines)
        order.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return _get_active_order(order_id)


# ---------- STATUS / WORKER ----------

def update_status(order_id, status, user_id) -> dict:
    """
    Applies a new status. Moving into COMPLETED from any other status also
    books the finished pieces into stock (see warehouse.services). A failed
    stock booking is logged and does not undo the status change.
    """
    new_status = parse_status(status)
    order = _get_active_order(order_id)
    previous = OrderStatus(order.status)
    ensure_transition(previous, new_status)

    try:
        order.status = new_status.value
        order.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    stock_updates = []
    if new_status is OrderStatus.COMPLETED and previous is not OrderStatus.COMPLETED:
        try:
            stock_updates = receive_completed_order(order, user_id)
            current_app.logger.info(
                f"Auto stock update completed for order {order.order_number}: "
                f"{len(stock_updates)} products updated"
            )
        except Exception:
            current_app.logger.exception(
                f"Error updating product stock automatically for order {order.order_number}"
            )
            stock_updates = []

    return {
        "success": True,
        "order": {
            "id": order.id,
            "status": order.status,
            "updatedAt": order.updated_at.isoformat(),
        },
        "stockUpdated": len(stock_updates) > 0,
        "stockUpdates": stock_updates,
    }


def update_worker(order_id, worker_contact_id) -> dict:
    order = _get_active_order(order_id)
    worker = _validate_worker(worker_contact_id)

    try:
        order.worker_contact_id = worker.id if worker else None
        order.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return {
        "success": True,
        "order": {
            "id": order.id,
            "workerContactId": order.worker_contact_id,
            "workerContact": worker_to_dict(worker),
            "updatedAt": order.updated_at.isoformat(),
        },
    }


# ---------- DELETE ----------

def delete_order(order_id, user_id) -> dict:
    order = _get_active_order(order_id)
    ensure_deletable(order.status)

    deleted_at = datetime.utcnow()
    try:
        order.is_active = False
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"Order {order.order_number} deleted by user {user_id} at {deleted_at.isoformat()}"
    )
    return {
        "success": True,
        "message": f"Order {order.order_number} deleted successfully",
        "order": {
            "id": order.id,
            "orderNumber": order.order_number,
            "status": order.status,
            "deletedAt": deleted_at.isoformat(),
        },
    }


# ---------- TIMELINE ----------

def get_timeline(order_id) -> dict:
    """
    Chronological events of one order:
      - order_created (always)
      - status_change (when the order was touched after creation)
      - stock_movement (one per ledger row booked by the order)
    """
    order = _get_active_order(order_id)
    author = order.user.name if order.user else "System"

    events = [{
        "type": "order_created",
        "title": "Order Created",
        "description": f"Order {order.order_number} was created",
        "timestamp": order.created_at,
        "user": author,
        "status": "created",
    }]

    if order.updated_at and order.created_at and order.updated_at > order.created_at:
        events.append({
            "type": "status_change",
            "title": "Status Updated",
            "description": f"Order status changed to {order.status}",
            "timestamp": order.updated_at,
            "user": author,
            "status": order.status,
        })

    movements = list_movements(order_id=order.id)
    for m in movements:
        events.append({
            "type": "stock_movement",
            "title": f"Stock {m.movement_type}",
            "description": m.notes,
            "timestamp": m.movement_date,
            "user": author,
            "status": order.status,
        })

    events.sort(key=lambda e: e["timestamp"])
    for idx, event in enumerate(events, start=1):
        event["id"] = idx
        event["timestamp"] = event["timestamp"].isoformat()

    return {
        "order": order,
        "createdBy": user_to_dict(order.user),
        "timeline": events,
        "statusChanges": [e for e in events if e["type"] == "status_change"],
        "stockMovements": [movement_to_dict(m) for m in movements],
    }
