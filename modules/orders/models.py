# modules/orders/models.py

from datetime import datetime
from extensions import db
from sqlalchemy import text

from .statuses import OrderStatus, OrderPriority


class Order(db.Model):
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(20), nullable=False, unique=True)

    status = db.Column(db.String(20), nullable=False, default=OrderStatus.CREATED.value, index=True)
    priority = db.Column(db.String(10), nullable=False, default=OrderPriority.MEDIUM.value, index=True)
    due_date = db.Column(db.DateTime, nullable=False)

    customer_note = db.Column(db.Text)
    description = db.Column(db.Text)

    # target_pcs == sum(OrderProduct.quantity) at the last write
    target_pcs = db.Column(db.Integer, nullable=False, default=0)
    completed_pcs = db.Column(db.Integer, nullable=False, default=0)

    worker_contact_id = db.Column(db.Integer, db.ForeignKey('contacts.id'), nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    is_active = db.Column(
        db.Boolean,
        nullable=False,
        server_default=text('TRUE'),
        default=True,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    worker_contact = db.relationship('Contact')
    user = db.relationship('User')
    lines = db.relationship(
        'OrderProduct',
        backref='order',
        cascade='all, delete-orphan',
        order_by='OrderProduct.id',
    )

    def __repr__(self):
        return f"<Order {self.order_number} {self.status}>"


class OrderProduct(db.Model):
    __tablename__ = 'order_products'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False, index=True)

    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    total_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    completed_qty = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='PENDING')
    notes = db.Column(db.Text)

    product = db.relationship('Product')

    def __repr__(self):
        return f"<OrderProduct order={self.order_id} product={self.product_id} qty={self.quantity}>"
