from datetime import datetime
from io import BytesIO

from flask import jsonify, request, send_file, current_app

from exceptions import InternalError
from modules.reports.pdf import render_orders_report
from modules.reports.services import build_report
from modules.users.context import require_user, current_user_id
from . import orders_bp
from . import services
from .forms import (
    OrderCreateForm, OrderUpdateForm, StatusForm, WorkerForm, OrderListForm,
    ReportFilterForm, LineProgressForm,
)
from .serializers import order_to_dict, order_summary_to_dict


orders_bp.before_request(require_user)


def _json_body():
    return request.get_json(silent=True) or {}


# ---------- LIST / DETAILS ----------

@orders_bp.route("", methods=["GET"], endpoint="index")
def index():
    form = OrderListForm.from_json(request.args.to_dict()).validate_or_raise()
    result = services.list_orders(
        page=form.page.data,
        limit=form.limit.data,
        status=form.status.data,
        priority=form.priority.data,
        search=form.search.data,
        sort_by=form.sort_by.data,
        sort_order=form.sort_order.data,
    )
    result["orders"] = [order_summary_to_dict(o) for o in result["orders"]]
    return jsonify(result)


@orders_bp.route("/<int:order_id>", methods=["GET"], endpoint="detail")
def detail(order_id):
    return jsonify(order_to_dict(services.get_order(order_id)))


@orders_bp.route("/<int:order_id>/timeline", methods=["GET"], endpoint="timeline")
def timeline(order_id):
    result = services.get_timeline(order_id)
    result["order"] = order_to_dict(result["order"])
    return jsonify(result)


# ---------- CHANGES ----------

@orders_bp.route("", methods=["POST"], endpoint="create")
def create():
    form = OrderCreateForm.from_json(_json_body()).validate_or_raise()
    order = services.create_order(form.submitted_data(), current_user_id())
    return jsonify({
        "success": True,
        "message": "Order created successfully",
        "order": order_to_dict(order),
    }), 201


@orders_bp.route("/<int:order_id>", methods=["PUT"], endpoint="update")
def update(order_id):
    form = OrderUpdateForm.from_json(_json_body()).validate_or_raise()
    order = services.update_order(order_id, form.submitted_data())
    return jsonify({
        "success": True,
        "message": "Order updated successfully",
        "order": order_to_dict(order),
    })


@orders_bp.route("/<int:order_id>/status", methods=["PATCH"], endpoint="update_status")
def update_status(order_id):
    form = StatusForm.from_json(_json_body()).validate_or_raise()
    return jsonify(services.update_status(order_id, form.status.data, current_user_id()))


@orders_bp.route("/<int:order_id>/worker", methods=["PATCH"], endpoint="update_worker")
def update_worker(order_id):
    form = WorkerForm.from_json(_json_body()).validate_or_raise()
    return jsonify(services.update_worker(order_id, form.worker_contact_id.data))


@orders_bp.route(
    "/<int:order_id>/products/<int:line_id>/progress", methods=["PATCH"], endpoint="line_progress"
)
def line_progress(order_id, line_id):
    form = LineProgressForm.from_json(_json_body()).validate_or_raise()
    order = services.update_line_progress(order_id, line_id, form.completed_qty.data)
    return jsonify({"success": True, "order": order_to_dict(order)})


@orders_bp.route("/<int:order_id>", methods=["DELETE"], endpoint="delete")
def delete(order_id):
    return jsonify(services.delete_order(order_id, current_user_id()))


# ---------- REPORT (PDF) ----------

@orders_bp.route("/report", methods=["POST"], endpoint="report")
def report():
    """All orders matching the filters (no pagination) as a PDF download."""
    payload = request.get_json(silent=True) or request.args.to_dict()
    form = ReportFilterForm.from_json(payload).validate_or_raise()

    data = build_report(
        status=form.status.data,
        priority=form.priority.data,
        search=form.search.data,
        date_from=form.date_from.data,
        date_to=form.date_to.data,
        sort_by=form.sort_by.data,
        sort_order=form.sort_order.data,
    )

    now = datetime.now()
    try:
        pdf = render_orders_report(data, now, title=current_app.config.get("REPORT_TITLE", "Orders Report"))
    except Exception:
        current_app.logger.exception("Error generating orders report")
        raise InternalError("Failed to generate orders report")

    return send_file(
        BytesIO(pdf),
        as_attachment=True,
        download_name=f"orders-report-{now.strftime('%Y-%m-%d')}.pdf",
        mimetype="application/pdf",
    )
