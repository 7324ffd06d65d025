# =============================================================================
# TEST ORDER STATUSES
# =============================================================================
# Parsing, transition table and delete guard
# =============================================================================

import pytest

from exceptions import ValidationError
from modules.orders.statuses import (
    OrderStatus, OrderPriority, TRANSITIONS, PROTECTED_STATUSES,
    parse_status, parse_priority, can_transition, ensure_transition, can_delete, ensure_deletable,
)


class TestParsing:

    @pytest.mark.parametrize("raw", ["completed", "COMPLETED", " Completed "])
    def test_status_is_case_insensitive(self, raw):
        assert parse_status(raw) is OrderStatus.COMPLETED

    @pytest.mark.parametrize("raw", ["DONE", "", None])
    def test_invalid_status_lists_accepted_values(self, raw):
        with pytest.raises(ValidationError) as exc:
            parse_status(raw)

        assert exc.value.message == (
            "Invalid status. Must be one of: CREATED, NEED_MATERIAL, CONFIRMED, "
            "PROCESSING, COMPLETED, SHIPPED, DELIVERED, CANCELLED"
        )
        assert exc.value.status_code == 400

    def test_priority_is_case_insensitive(self):
        assert parse_priority("urgent") is OrderPriority.URGENT

    def test_invalid_priority(self):
        with pytest.raises(ValidationError, match="Invalid priority"):
            parse_priority("critical")


class TestTransitions:

    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize("previous", list(OrderStatus))
    def test_table_is_permissive(self, previous):
        for new in OrderStatus:
            assert can_transition(previous, new)
            ensure_transition(previous, new)

    def test_plain_strings_are_accepted(self):
        assert can_transition("CREATED", "COMPLETED")


class TestDeleteGuard:

    @pytest.mark.parametrize("status", ["PROCESSING", "COMPLETED", "SHIPPED", "DELIVERED"])
    def test_protected(self, status):
        assert OrderStatus(status) in PROTECTED_STATUSES
        assert not can_delete(status)

    @pytest.mark.parametrize("status", ["CREATED", "NEED_MATERIAL", "CONFIRMED", "CANCELLED"])
    def test_deletable(self, status):
        assert can_delete(status)
        ensure_deletable(status)

    def test_message_names_deletable_statuses(self):
        with pytest.raises(ValidationError) as exc:
            ensure_deletable("SHIPPED")

        assert exc.value.message == (
            "Cannot delete order with status: SHIPPED. Only orders with status "
            "'CREATED', 'NEED_MATERIAL', 'CONFIRMED', 'CANCELLED' can be deleted."
        )
