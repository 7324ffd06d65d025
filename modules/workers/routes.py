from flask import jsonify, current_app

from modules.users.context import require_user
from . import workers_bp
from .cache import get_workers_cache


workers_bp.before_request(require_user)


@workers_bp.route("", methods=["GET"], endpoint="index")
def index():
    return jsonify(get_workers_cache().get())


@workers_bp.route("/cache/clear", methods=["POST"], endpoint="clear_cache")
def clear_cache():
    get_workers_cache().clear()
    current_app.logger.info("Workers cache cleared")
    return jsonify({"success": True, "message": "Workers cache cleared"})
