"""
Order Lifecycle Tests

Staff move orders through the kitchen flow. Completing or cancelling an
order frees its table; the customer's table channel hears every change.
"""
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from orders.models import Order
from tables.models import Table
from tableside.exceptions import BusinessRuleViolation, InvalidStatusTransition, ResourceNotFound

S = Order.OrderStatus


@pytest.mark.django_db
class TestStatusFlow:
    def test_full_kitchen_flow(
        self, lifecycle_service, notifier, placed_order, table, django_capture_on_commit_callbacks
    ):
        """
        Scenario:
        - pending -> confirmed -> preparing -> ready -> served -> completed
        - Expected: each step notifies table-5, completion frees the table

        Value: The customer's status page tracks the kitchen without polling
        """
        flow = [S.CONFIRMED, S.PREPARING, S.READY, S.SERVED, S.COMPLETED]

        with django_capture_on_commit_callbacks(execute=True):
            for new_status in flow:
                order = lifecycle_service.set_status(placed_order, new_status)

        assert order.status == S.COMPLETED
        assert order.completed_at is not None

        assert [target for target, _, _ in notifier.events] == ["table-5"] * len(flow)
        assert [data["status"] for _, _, data in notifier.events] == list(flow)

        table.refresh_from_db()
        assert table.status == Table.Status.AVAILABLE
        assert table.current_order is None

    def test_estimated_ready_time_only_sent_while_active(
        self, lifecycle_service, notifier, placed_order, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            lifecycle_service.set_status(placed_order, S.PREPARING)
            lifecycle_service.set_status(placed_order, S.SERVED)

        preparing, served = [data for _, _, data in notifier.events]
        assert preparing["estimated_ready_time"] is not None
        assert served["estimated_ready_time"] is None

    def test_steps_may_be_skipped(self, lifecycle_service, notifier, placed_order):
        order = lifecycle_service.set_status(placed_order, S.READY)
        assert order.status == S.READY

    def test_intermediate_status_keeps_table_occupied(self, lifecycle_service, notifier, placed_order, table):
        lifecycle_service.set_status(placed_order, S.SERVED)

        table.refresh_from_db()
        assert table.status == Table.Status.OCCUPIED
        assert table.current_order_id == placed_order.pk

    def test_unknown_status_rejected(self, lifecycle_service, notifier, placed_order):
        with pytest.raises(BusinessRuleViolation):
            lifecycle_service.set_status(placed_order, "teleported")

    @pytest.mark.parametrize("final_status", [S.COMPLETED, S.CANCELLED])
    def test_final_orders_cannot_move(self, lifecycle_service, notifier, placed_order, final_status):
        lifecycle_service.set_status(placed_order, final_status)

        with pytest.raises(InvalidStatusTransition):
            lifecycle_service.set_status(placed_order, S.PENDING)

        placed_order.refresh_from_db()
        assert placed_order.status == final_status

    def test_get_order_missing(self, lifecycle_service):
        with pytest.raises(ResourceNotFound):
            lifecycle_service.get_order("3f2b8c1e-0000-4000-8000-000000000000")

    def test_get_order_malformed_id(self, lifecycle_service):
        with pytest.raises(ResourceNotFound):
            lifecycle_service.get_order("not-a-uuid")


@pytest.mark.django_db
class TestCancellation:
    def test_cancel_pending_order(
        self, lifecycle_service, notifier, placed_order, table, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            order = lifecycle_service.cancel_order(placed_order)

        assert order.status == S.CANCELLED
        table.refresh_from_db()
        assert table.status == Table.Status.AVAILABLE
        assert table.current_order is None

        assert notifier.names() == ["order-cancelled"]
        target, _, data = notifier.events[0]
        assert target == "table-5"
        assert data["order_number"] == placed_order.order_number

    def test_cancel_via_status_change(self, lifecycle_service, notifier, placed_order):
        order = lifecycle_service.set_status(placed_order, S.CANCELLED)
        assert order.status == S.CANCELLED

    @pytest.mark.parametrize("kitchen_status", [S.PREPARING, S.READY])
    def test_cannot_cancel_once_kitchen_started(
        self, lifecycle_service, notifier, placed_order, kitchen_status
    ):
        """
        Scenario:
        - Order is already being prepared (or is ready)
        - Staff try to cancel it
        - Expected: rejected, status unchanged

        Business Impact: Food already cooked is not silently written off
        """
        lifecycle_service.set_status(placed_order, kitchen_status)

        with pytest.raises(InvalidStatusTransition):
            lifecycle_service.cancel_order(placed_order)

        placed_order.refresh_from_db()
        assert placed_order.status == kitchen_status

    def test_cannot_cancel_twice(self, lifecycle_service, notifier, placed_order):
        lifecycle_service.cancel_order(placed_order)

        with pytest.raises(InvalidStatusTransition):
            lifecycle_service.cancel_order(placed_order)


@pytest.mark.django_db
class TestLifecycleAtomicity:
    def test_release_failure_leaves_status_unchanged(
        self, lifecycle_service, notifier, placed_order, table, django_capture_on_commit_callbacks
    ):
        """
        CRITICAL: Completing an order and freeing its table happen together.

        Scenario:
        - Order is served
        - Releasing the table fails during completion
        - Expected: order still served, table still occupied, no notification
        """
        lifecycle_service.set_status(placed_order, S.SERVED)

        with django_capture_on_commit_callbacks(execute=True):
            with patch.object(
                lifecycle_service.table_service, "release_for_order", side_effect=DatabaseError("boom")
            ):
                with pytest.raises(DatabaseError):
                    lifecycle_service.set_status(placed_order, S.COMPLETED)

        placed_order.refresh_from_db()
        assert placed_order.status == S.SERVED
        assert placed_order.completed_at is None
        table.refresh_from_db()
        assert table.current_order_id == placed_order.pk
        assert notifier.events == []

    def test_completion_does_not_free_table_of_newer_order(
        self, lifecycle_service, notifier, placed_order, table
    ):
        newer = Order.objects.create(order_number="ORD-20260101-NEWER2", table_number=table.number)
        Table.objects.filter(pk=table.pk).update(current_order=newer)

        lifecycle_service.set_status(placed_order, S.COMPLETED)

        table.refresh_from_db()
        assert table.current_order_id == newer.pk
