# modules/reference/contacts/models.py

from datetime import datetime
from extensions import db
from sqlalchemy import text


class Contact(db.Model):
    """
    Party record of any kind. Only an active contact with
    contact_type == "WORKER" can be assigned to an order.
    """
    __tablename__ = 'contacts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255))
    phone = db.Column(db.String(64))
    whatsapp_phone = db.Column(db.String(64))
    company = db.Column(db.String(255))
    notes = db.Column(db.Text)

    contact_type = db.Column(db.String(16), nullable=False, default="OTHER", index=True)
    is_active = db.Column(
        db.Boolean,
        nullable=False,
        server_default=text('TRUE'),
        default=True,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def active_workers(cls):
        return cls.query.filter(cls.contact_type == "WORKER", cls.is_active.is_(True))

    def __repr__(self):
        return f"<Contact id={self.id} {self.contact_type} '{self.name}'>"
