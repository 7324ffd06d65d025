from extensions import db
from datetime import datetime

class MaterialMovement(db.Model):
    __tablename__ = "material_movements"

    id = db.Column(db.Integer, primary_key=True)

    # Weak references: the ledger outlives whatever it points at
    material_id = db.Column(db.Integer, nullable=False, index=True)
    order_id = db.Column(db.Integer, nullable=True, index=True)
    user_id = db.Column(db.Integer, nullable=False)

    movement_type = db.Column(db.String(10), nullable=False, default="IN")  # IN | OUT
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(32), nullable=False, default="pcs")
    qty_after = db.Column(db.Float, nullable=False)   # running balance after the movement
    movement_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    notes = db.Column(db.String(255))

    def __repr__(self) -> str:
        return f"<MaterialMovement id={self.id} {self.movement_type} {self.quantity} after={self.qty_after}>"
