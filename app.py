import sys, os
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from config import Config
from exceptions import AppError, ConflictError, InternalError
from extensions import db
from register_blueprints import register_blueprints

def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = "dev-change-me"

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)
    register_blueprints(app)

    from modules.workers.cache import init_workers_cache
    init_workers_cache(app)

    # Models (relationships resolve by class name)
    from modules.users.models import User
    from modules.reference.contacts.models import Contact
    from modules.reference.products.models import Product
    from modules.orders.models import Order, OrderProduct
    from modules.warehouse.models import MaterialMovement

    with app.app_context():
        db.create_all()

    @app.route('/health')
    def health():
        return jsonify({"status": "ok"})

    # ── service errors: status code and message come from the exception
    def _app_error_handler(e):
        if e.status_code >= 500:
            db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    # ── single IntegrityError handler
    def _integrity_error_handler(e):
        db.session.rollback()
        msg = str(getattr(e, "orig", e))
        app.logger.warning(f"IntegrityError caught: {msg}")
        err = ConflictError("Data integrity violation. Check unique values and references.")
        return jsonify(err.to_dict()), err.status_code

    def _http_error_handler(e):
        return jsonify({"code": e.name.upper().replace(" ", "_"), "message": e.description}), e.code

    # ── anything else: log the details, answer with a generic message
    def _unhandled_error_handler(e):
        if isinstance(e, HTTPException):
            return _http_error_handler(e)
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {e}")
        err = InternalError()
        return jsonify(err.to_dict()), err.status_code

    app.register_error_handler(AppError, _app_error_handler)
    app.register_error_handler(IntegrityError, _integrity_error_handler)
    app.register_error_handler(HTTPException, _http_error_handler)
    app.register_error_handler(Exception, _unhandled_error_handler)

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5001, debug=True)
