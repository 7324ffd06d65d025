# =============================================================================
# TEST ORDERS REPORT
# =============================================================================
# Flattening, summary, filter text and the PDF endpoint
# =============================================================================

import re
from datetime import datetime, timedelta

from reportlab.pdfbase.pdfmetrics import stringWidth

from modules.orders import services
from modules.orders.models import Order
from modules.reports.pdf import (
    CELL_FONT_SIZE, CELL_PADDING, render_orders_report, summary_line, table_data,
)
from modules.reports.services import _flatten, build_report, describe_filters


def _page_count(pdf: bytes) -> int:
    return len(re.findall(rb"/Type\s*/Page\b", pdf))


class TestFlatten:

    def test_order_without_lines_gives_placeholder_row(self, app):
        order = Order(order_number="ORD-000042", status="CREATED", priority="LOW")

        rows = _flatten(order)

        assert len(rows) == 1
        row = rows[0]
        assert row["orderNumber"] == "ORD-000042"
        assert row["productName"] == "No Products"
        assert row["productCode"] == "N/A"
        assert row["quantity"] == 0
        assert row["completedQty"] == 0
        assert row["tailorName"] == "Not Assigned"
        assert row["dueDate"] == "No due date"

    def test_one_row_per_line(self, make_order, workers):
        order = make_order(worker_contact_id=workers["bella"].id, customer_note="Gift box")

        rows = _flatten(order)

        assert [r["productName"] for r in rows] == ["Hijab Square Voal", "Hijab Pashmina Ceruti"]
        assert [r["productCode"] for r in rows] == ["HJ-SQ", "HJ-PS"]
        assert {r["tailorName"] for r in rows} == {"Bella Ortiz"}
        assert {r["customerNote"] for r in rows} == {"Gift box"}
        assert rows[0]["dueDate"] == order.due_date.strftime("%Y-%m-%d")


class TestBuildReport:

    def test_summary(self, make_order, user):
        first = make_order()
        make_order()
        services.update_line_progress(first.id, first.lines[0].id, 3)

        report = build_report()

        assert report["summary"] == {
            "totalOrders": 2,
            "totalRows": 4,
            "totalQuantity": 24,
            "totalCompleted": 3,
        }
        assert report["filterText"] == "Filters: All Status All Priority"

    def test_filters_and_zero_matches(self, make_order):
        make_order()

        report = build_report(status="DELIVERED")

        assert report["rows"] == []
        assert report["summary"]["totalOrders"] == 0
        assert summary_line(report["summary"]).startswith("Total Orders: 0")

    def test_all_means_no_filter(self, make_order):
        make_order()

        report = build_report(status="all", priority="ALL")

        assert report["summary"]["totalOrders"] == 1
        assert report["filterText"] == "Filters: All Status All Priority"

    def test_created_date_range_is_inclusive(self, make_order):
        make_order()
        today = datetime.utcnow().date()

        assert build_report(date_from=today, date_to=today)["summary"]["totalOrders"] == 1
        assert build_report(date_from=today + timedelta(days=1))["summary"]["totalOrders"] == 0
        assert build_report(date_to=today - timedelta(days=1))["summary"]["totalOrders"] == 0

    def test_deleted_orders_excluded(self, make_order, user):
        order = make_order()
        services.delete_order(order.id, user.id)

        assert build_report()["summary"]["totalOrders"] == 0


class TestDescribeFilters:

    def test_defaults(self):
        assert describe_filters() == "Filters: All Status All Priority"

    def test_everything(self):
        text = describe_filters(
            status="CREATED", priority="HIGH", search="rose",
            date_from=datetime(2024, 3, 1).date(), date_to=datetime(2024, 3, 31).date(),
        )
        assert text == 'Filters: Status=CREATED Priority=HIGH Search="rose" From=2024-03-01 To=2024-03-31'


class TestRenderPdf:

    @staticmethod
    def _report(rows):
        return {
            "rows": rows,
            "summary": {
                "totalOrders": len(rows),
                "totalRows": len(rows),
                "totalQuantity": sum(r["quantity"] for r in rows),
                "totalCompleted": 0,
            },
            "filterText": "Filters: All Status All Priority",
        }

    @staticmethod
    def _row(n):
        return {
            "orderNumber": f"ORD-{n:06d}",
            "productName": "A product name long enough to be cut at twenty-five characters",
            "productCode": "P",
            "quantity": 2,
            "completedQty": 0,
            "orderStatus": "CREATED",
            "priority": "MEDIUM",
            "tailorName": "Not Assigned",
            "dueDate": "2030-01-01",
            "customerNote": "",
            "createdAt": "2029-12-01",
        }

    def test_table_data_header_and_truncation(self):
        data = table_data([self._row(1)], "Helvetica")

        assert data[0] == ["Order #", "Product Name", "Qty", "Done", "Status", "Priority", "Due Date"]
        assert data[1][0] == "ORD-000001"
        assert data[1][1] == "A product name long enough"[:25]
        assert data[1][2] == "2"

    def test_cells_are_clipped_to_column_width(self):
        row = self._row(1)
        row["orderStatus"] = "A STATUS FAR TOO WIDE FOR ITS EIGHTY POINT COLUMN"

        cell = table_data([row], "Helvetica")[1][4]

        assert cell.endswith("...")
        assert stringWidth(cell, "Helvetica", CELL_FONT_SIZE) <= 80 - CELL_PADDING

    def test_empty_report_is_a_valid_pdf(self):
        pdf = render_orders_report(self._report([]), datetime(2024, 1, 2, 3, 4, 5))

        assert pdf.startswith(b"%PDF")
        assert _page_count(pdf) == 1

    def test_long_table_spans_pages(self):
        pdf = render_orders_report(
            self._report([self._row(n) for n in range(30)]), datetime(2024, 1, 2, 3, 4, 5)
        )

        assert _page_count(pdf) == 2


class TestReportEndpoint:

    def test_download(self, client, auth_headers, make_order):
        make_order()

        response = client.post("/orders/report", json={"status": "all"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.data.startswith(b"%PDF")
        disposition = response.headers["Content-Disposition"]
        assert disposition.startswith("attachment")
        assert re.search(r"orders-report-\d{4}-\d{2}-\d{2}\.pdf", disposition)

    def test_zero_matches_still_downloads(self, client, auth_headers, user):
        response = client.post("/orders/report", json={"status": "DELIVERED"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.data.startswith(b"%PDF")

    def test_bad_date(self, client, auth_headers, user):
        response = client.post("/orders/report", json={"dateFrom": "yesterday"}, headers=auth_headers)

        assert response.status_code == 400

    def test_render_failure(self, client, auth_headers, user, monkeypatch):
        from modules.orders import routes

        def broken(*args, **kwargs):
            raise RuntimeError("font missing")

        monkeypatch.setattr(routes, "render_orders_report", broken)

        response = client.post("/orders/report", json={}, headers=auth_headers)

        assert response.status_code == 500
        assert response.get_json()["message"] == "Failed to generate orders report"
