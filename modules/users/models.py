from extensions import db
from sqlalchemy import text


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True)
    is_active = db.Column(
        db.Boolean,
        nullable=False,
        server_default=text('TRUE'),
        default=True,
    )

    def __repr__(self):
        return f'<User {self.email}>'
