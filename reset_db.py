# reset_db.py

from app import create_app
from extensions import db

app = create_app()

with app.app_context():
    print("⚠️ All tables will be dropped...")
    db.drop_all()
    print("🧹 Tables dropped.")
    db.create_all()
    print("✅ Database recreated.")
