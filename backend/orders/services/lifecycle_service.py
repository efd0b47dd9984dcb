import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from orders.models import Order
from tableside.exceptions import BusinessRuleViolation, InvalidStatusTransition, ResourceNotFound

logger = logging.getLogger(__name__)

S = Order.OrderStatus

ALL_STATUSES = list(S.values)


class OrderLifecycleService:
    """
    Status changes for placed orders.

    Open orders may be moved to any status, including skipping steps. Once
    an order is preparing or ready it can no longer be cancelled. Completed and cancelled orders
    are final. Completing or cancelling an order frees its table in the same
    transaction as the status write.
    """

    VALID_STATUS_TRANSITIONS = {
        S.PENDING: ALL_STATUSES,
        S.CONFIRMED: ALL_STATUSES,
        S.PREPARING: [s for s in ALL_STATUSES if s != S.CANCELLED],
        S.READY: [s for s in ALL_STATUSES if s != S.CANCELLED],
        S.SERVED: ALL_STATUSES,
        S.COMPLETED: [],
        S.CANCELLED: [],
    }

    def __init__(self, notifier, table_service):
        self.notifier = notifier
        self.table_service = table_service

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.prefetch_related("items__menu_item").get(pk=order_id)
        except (Order.DoesNotExist, ValueError, ValidationError):
            raise ResourceNotFound("Order", order_id)

    def set_status(self, order: Order, new_status: str) -> Order:
        if new_status not in S.values:
            raise BusinessRuleViolation(f"'{new_status}' is not a valid order status.")

        if new_status == S.CANCELLED:
            return self.cancel_order(order)

        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            self._check_transition(order, new_status)

            old_status = order.status
            order.status = new_status
            update_fields = ["status", "updated_at"]

            if new_status == S.COMPLETED:
                order.completed_at = timezone.now()
                update_fields.append("completed_at")

            order.save(update_fields=update_fields)

            if new_status == S.COMPLETED:
                self.table_service.release_for_order(order)

            self.notifier.order_status_updated(
                order.table_number,
                {
                    "order_id": order.pk,
                    "order_number": order.order_number,
                    "status": order.status,
                    "estimated_ready_time": (
                        order.estimated_ready_time if order.status in Order.ACTIVE_STATUSES else None
                    ),
                },
            )

        logger.info(f"Order {order.order_number}: {old_status} -> {new_status}")
        return order

    def cancel_order(self, order: Order) -> Order:
        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)

            if order.status in (S.PREPARING, S.READY):
                raise InvalidStatusTransition(
                    order,
                    S.CANCELLED,
                    message="Cannot cancel an order that is being prepared or is ready",
                )
            if order.is_terminal:
                raise InvalidStatusTransition(
                    order, S.CANCELLED, message=f"Order {order.order_number} is already {order.status}"
                )

            old_status = order.status
            order.status = S.CANCELLED
            order.save(update_fields=["status", "updated_at"])

            self.table_service.release_for_order(order)

            self.notifier.order_cancelled(
                order.table_number,
                {
                    "order_id": order.pk,
                    "order_number": order.order_number,
                    "message": "Your order has been cancelled",
                },
            )

        logger.info(f"Order {order.order_number} cancelled (was {old_status})")
        return order

    def _check_transition(self, order: Order, new_status: str):
        if new_status not in self.VALID_STATUS_TRANSITIONS.get(order.status, []):
            logger.warning(f"Rejected transition for {order.order_number}: {order.status} -> {new_status}")
            raise InvalidStatusTransition(order, new_status)
