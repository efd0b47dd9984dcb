import logging

from django.db import transaction
from django.utils import timezone

from orders.models import Order
from tableside.exceptions import BusinessRuleViolation, ResourceNotFound
from .models import ServiceCall, Table
from .qr import qr_data_url

logger = logging.getLogger(__name__)


class TableService:
    """
    Table occupancy, status and service calls.

    Holds the notifier used to tell staff about service calls. Occupy and
    release are called by the order services inside their own transactions.
    """

    def __init__(self, notifier):
        self.notifier = notifier

    @staticmethod
    def get_table(number) -> Table:
        try:
            return Table.objects.select_related("current_order").get(number=number)
        except Table.DoesNotExist:
            raise ResourceNotFound("Table", number)

    @staticmethod
    def lock_table(number) -> Table:
        """Fetch a table row for update. Must run inside a transaction."""
        try:
            return Table.objects.select_for_update().get(number=number)
        except Table.DoesNotExist:
            raise ResourceNotFound("Table", number)

    @staticmethod
    def has_open_order(table: Table) -> bool:
        if table.current_order_id is None:
            return False
        return Order.objects.filter(pk=table.current_order_id).exclude(
            status__in=Order.TERMINAL_STATUSES
        ).exists()

    def occupy(self, table: Table, order: Order) -> Table:
        table.status = Table.Status.OCCUPIED
        table.current_order = order
        table.save(update_fields=["status", "current_order", "updated_at"])
        logger.info(f"Table {table.number} occupied by order {order.order_number}")
        return table

    def release_for_order(self, order: Order) -> bool:
        """
        Free the order's table.

        The table is only touched when it still points at this order (or at
        nothing), so a late release cannot clear a newer order's table.
        Returns whether the table was released.
        """
        with transaction.atomic():
            table = Table.objects.select_for_update().filter(number=order.table_number).first()
            if table is None:
                logger.warning(f"Order {order.order_number} references missing table {order.table_number}")
                return False

            if table.current_order_id not in (None, order.pk):
                logger.warning(
                    f"Table {table.number} now holds another order; "
                    f"not releasing it for {order.order_number}"
                )
                return False

            table.status = Table.Status.AVAILABLE
            table.current_order = None
            table.save(update_fields=["status", "current_order", "updated_at"])

        logger.info(f"Table {table.number} released by order {order.order_number}")
        return True

    @transaction.atomic
    def set_status(self, number, new_status: str) -> Table:
        if new_status not in Table.Status.values:
            raise BusinessRuleViolation(f"'{new_status}' is not a valid table status.")

        table = self.lock_table(number)
        table.status = new_status
        update_fields = ["status", "updated_at"]
        if new_status == Table.Status.AVAILABLE:
            table.current_order = None
            update_fields.append("current_order")
        table.save(update_fields=update_fields)
        logger.info(f"Table {table.number} status set to {new_status}")
        return table

    def request_service(self, number, message: str = None) -> ServiceCall:
        table = self.get_table(number)
        message = (message or "").strip() or ServiceCall.DEFAULT_MESSAGE

        call = ServiceCall.objects.create(table=table, message=message)
        logger.info(f"Service call {call.pk} from table {table.number}: {message}")

        self.notifier.service_called(
            table_number=table.number,
            data={
                "id": call.pk,
                "table_number": table.number,
                "table_location": table.location,
                "message": call.message,
                "timestamp": call.created_at,
            },
        )
        return call

    @staticmethod
    def resolve_service_call(number, call_id) -> ServiceCall:
        try:
            call = ServiceCall.objects.select_related("table").get(
                pk=call_id, table__number=number
            )
        except ServiceCall.DoesNotExist:
            raise ResourceNotFound("Service call", call_id)

        if not call.resolved:
            call.resolved = True
            call.resolved_at = timezone.now()
            call.save(update_fields=["resolved", "resolved_at"])
            logger.info(f"Service call {call.pk} at table {number} resolved")
        return call

    @staticmethod
    def qr_code(table: Table) -> dict:
        return {"qr_code": qr_data_url(table.qr_code), "url": table.qr_code}
