# modules/reference/products/models.py

from extensions import db


class Product(db.Model):
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(64), unique=True)
    unit = db.Column(db.String(32), nullable=False, default='pcs')
    category = db.Column(db.String(100))
    price = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # stock on hand; moved only by completed orders
    qty_on_hand = db.Column(db.Float, nullable=False, default=0.0)

    # weak reference to the fabric the product is sewn from
    material_id = db.Column(db.Integer, nullable=True)

    def __repr__(self):
        return f'<Product {self.code or self.id} {self.name}>'
