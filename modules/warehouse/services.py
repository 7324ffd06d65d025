# modules/warehouse/services.py
from datetime import datetime

from flask import current_app
from extensions import db

from modules.reference.products.models import Product
from .models import MaterialMovement


def receive_completed_order(order, user_id):
    """
    Books finished goods of a completed order into stock.

    For every line with completed_qty > 0: re-reads the product under a row
    lock, adds completed_qty to qty_on_hand and appends an IN movement with
    the new balance. Everything is committed as one transaction; on any
    error the transaction is rolled back and the error propagates.
    Returns [{productId, productName, previousStock, addedQuantity, newStock}].
    """
    default_material_id = current_app.config.get("DEFAULT_MATERIAL_ID", 1)
    updates = []

    try:
        for line in order.lines:
            completed_qty = line.completed_qty or 0
            if completed_qty <= 0:
                continue

            product = db.session.get(
                Product, line.product_id, with_for_update=True, populate_existing=True
            )
            if product is None:
                raise LookupError(f"Product {line.product_id} of order {order.order_number} no longer exists")

            previous = float(product.qty_on_hand or 0.0)
            new_balance = previous + completed_qty
            product.qty_on_hand = new_balance

            db.session.add(MaterialMovement(
                material_id=product.material_id or default_material_id,
                order_id=order.id,
                user_id=user_id,
                movement_type="IN",
                quantity=completed_qty,
                unit=product.unit or "pcs",
                qty_after=new_balance,
                notes=f"Auto stock increase from completed order {order.order_number} - Product: {product.name}"[:255],
                movement_date=datetime.utcnow(),
            ))

            updates.append({
                "productId": product.id,
                "productName": product.name,
                "previousStock": previous,
                "addedQuantity": completed_qty,
                "newStock": new_balance,
            })

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return updates


def list_movements(order_id=None, limit=200):
    """Ledger, newest first; optionally only the movements of one order."""
    q = MaterialMovement.query
    if order_id:
        q = q.filter(MaterialMovement.order_id == order_id)
    return (
        q.order_by(MaterialMovement.movement_date.desc(), MaterialMovement.id.desc())
        .limit(limit)
        .all()
    )
