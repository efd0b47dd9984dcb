import json
import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

logger = logging.getLogger(__name__)

STAFF_GROUP = "admin"


def table_group(table_number) -> str:
    return f"table-{table_number}"


class Events:
    NEW_ORDER = "new-order"
    SERVICE_CALLED = "service-called"
    ORDER_STATUS_UPDATED = "order-status-updated"
    ORDER_CANCELLED = "order-cancelled"


class NotificationService:
    """
    Fan-out of restaurant events to connected WebSocket clients.

    Delivery is best effort and at most once: an event reaches the sockets
    that are in the target group when it is sent, nothing is stored and
    nothing is replayed. Clients treat an event as a hint to re-fetch.

    One instance is created when the notifications app is ready and handed
    to the services that publish. Events published inside a transaction are
    held until it commits and dropped if it rolls back. Publishing never
    raises into the caller.
    """

    def __init__(self, channel_layer=None):
        self.channel_layer = channel_layer
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        if self.channel_layer is None:
            self.channel_layer = get_channel_layer()
        if self.channel_layer is None:
            logger.warning("No channel layer configured; real-time notifications are disabled")
        self._running = True
        logger.debug("Notification service started")

    def stop(self):
        if self._running:
            logger.debug("Notification service stopped")
        self._running = False

    # Event helpers

    def new_order(self, data: Dict[str, Any]):
        self.publish(STAFF_GROUP, Events.NEW_ORDER, data)

    def service_called(self, table_number, data: Dict[str, Any]):
        self.publish(STAFF_GROUP, Events.SERVICE_CALLED, data)

    def order_status_updated(self, table_number, data: Dict[str, Any]):
        self.publish(table_group(table_number), Events.ORDER_STATUS_UPDATED, data)

    def order_cancelled(self, table_number, data: Dict[str, Any]):
        self.publish(table_group(table_number), Events.ORDER_CANCELLED, data)

    # Delivery

    def publish(self, group: str, event: str, data: Dict[str, Any]):
        """Send now, or once the surrounding transaction commits."""
        try:
            payload = self._to_wire(data)

            if transaction.get_connection().in_atomic_block:
                logger.debug(f"Deferring {event} to {group} until commit")
                transaction.on_commit(lambda: self._send(group, event, payload))
            else:
                self._send(group, event, payload)

        except Exception as e:
            logger.error(f"Error publishing {event} to {group}: {e}", exc_info=True)

    def _send(self, group: str, event: str, payload: Dict[str, Any]):
        if not self._running:
            logger.debug(f"Notification service stopped; dropping {event} for {group}")
            return
        if self.channel_layer is None:
            logger.warning(f"No channel layer available; dropping {event} for {group}")
            return

        try:
            async_to_sync(self.channel_layer.group_send)(
                group,
                {
                    "type": "broadcast.event",
                    "event": event,
                    "data": payload,
                },
            )
            logger.info(f"Sent {event} to {group}")
        except Exception as e:
            logger.error(f"Error sending {event} to {group}: {e}", exc_info=True)

    @staticmethod
    def _to_wire(data: Dict[str, Any]) -> Dict[str, Any]:
        # Channel layers only carry plain JSON types
        return json.loads(json.dumps(data, cls=DjangoJSONEncoder))
