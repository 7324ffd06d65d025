# modules/orders/serializers.py
"""
Single response-shaping step for orders: ORM objects -> camelCase dicts
consumed by the dashboard.
"""


def _iso(dt):
    return dt.isoformat() if dt is not None else None


def _num(value):
    return float(value) if value is not None else None


def user_to_dict(user):
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def worker_to_dict(contact, with_notes=False):
    if contact is None:
        return None
    out = {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "whatsappPhone": contact.whatsapp_phone,
        "company": contact.company,
    }
    if with_notes:
        out["notes"] = contact.notes
    return out


def product_to_dict(product):
    if product is None:
        return None
    return {
        "id": product.id,
        "name": product.name,
        "code": product.code,
        "unit": product.unit,
        "price": _num(product.price),
        "category": product.category,
    }


def line_to_dict(line):
    return {
        "id": line.id,
        "productId": line.product_id,
        "quantity": line.quantity,
        "unitPrice": _num(line.unit_price),
        "totalPrice": _num(line.total_price),
        "completedQty": line.completed_qty,
        "status": line.status,
        "notes": line.notes,
        "product": product_to_dict(line.product),
    }


def order_summary_to_dict(order):
    """Row of the orders list: order fields, worker and a short line summary."""
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": order.status,
        "priority": order.priority,
        "dueDate": _iso(order.due_date),
        "targetPcs": order.target_pcs,
        "completedPcs": order.completed_pcs,
        "customerNote": order.customer_note,
        "description": order.description,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
        "workerContactId": order.worker_contact_id,
        "workerContact": worker_to_dict(order.worker_contact),
        "orderProducts": [
            {
                "id": line.id,
                "quantity": line.quantity,
                "product": {
                    "id": line.product.id,
                    "name": line.product.name,
                    "code": line.product.code,
                } if line.product else None,
            }
            for line in order.lines
        ],
        "productCount": len(order.lines),
    }


def order_to_dict(order):
    """Full order view with creator, worker and product lines."""
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "status": order.status,
        "priority": order.priority,
        "dueDate": _iso(order.due_date),
        "targetPcs": order.target_pcs,
        "completedPcs": order.completed_pcs,
        "customerNote": order.customer_note,
        "description": order.description,
        "isActive": order.is_active,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
        "userId": order.user_id,
        "user": user_to_dict(order.user),
        "workerContactId": order.worker_contact_id,
        "workerContact": worker_to_dict(order.worker_contact, with_notes=True),
        "orderProducts": [line_to_dict(line) for line in order.lines],
    }


def movement_to_dict(movement):
    return {
        "id": movement.id,
        "materialId": movement.material_id,
        "orderId": movement.order_id,
        "userId": movement.user_id,
        "movementType": movement.movement_type,
        "quantity": movement.quantity,
        "unit": movement.unit,
        "qtyAfter": movement.qty_after,
        "notes": movement.notes,
        "movementDate": _iso(movement.movement_date),
    }
