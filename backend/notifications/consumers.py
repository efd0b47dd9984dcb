import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.apps import apps
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from tableside.exceptions import TablesideError
from .services import STAFF_GROUP, table_group

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Real-time channel for customers and staff.

    Anyone may connect. Customers join the room of the table they sit at;
    authenticated staff join the staff room. Clients send
    {"action": ..., ...} frames and receive {"event": ..., "data": ...}.
    """

    async def connect(self):
        self.joined_groups = set()
        await self.accept()

        user = self.scope.get("user")
        logger.info(
            f"Notification socket connected: {self.channel_name} "
            f"(user={getattr(user, 'username', None) or 'anonymous'})"
        )

        await self.send_event("connection-established", {"timestamp": timezone.now()})

    async def disconnect(self, close_code):
        for group in getattr(self, "joined_groups", set()):
            await self.channel_layer.group_discard(group, self.channel_name)
        logger.info(f"Notification socket {self.channel_name} disconnected ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON received on {self.channel_name}")
            await self.send_error("Invalid JSON")
            return

        if not isinstance(data, dict):
            await self.send_error("Expected a JSON object")
            return

        action = data.get("action")

        if action == "join-table":
            await self.join_table(data)
        elif action == "leave-table":
            await self.leave_table(data)
        elif action == "join-admin":
            await self.join_admin()
        elif action == "call-service":
            await self.call_service(data)
        elif action == "ping":
            await self.send_event("pong", {"timestamp": timezone.now()})
        else:
            logger.warning(f"Unknown action from {self.channel_name}: {action}")
            await self.send_error(f"Unknown action: {action}")

    # Actions

    async def join_table(self, data):
        table_number = self.parse_table_number(data)
        if table_number is None:
            await self.send_error("A numeric table_number is required")
            return

        exists = await self.table_exists(table_number)
        if not exists:
            await self.send_error(f"Table {table_number} not found")
            return

        group = table_group(table_number)
        await self.join(group)
        await self.send_event("joined", {"room": group})

    async def leave_table(self, data):
        table_number = self.parse_table_number(data)
        if table_number is None:
            await self.send_error("A numeric table_number is required")
            return

        group = table_group(table_number)
        if group in self.joined_groups:
            await self.channel_layer.group_discard(group, self.channel_name)
            self.joined_groups.discard(group)
        await self.send_event("left", {"room": group})

    async def join_admin(self):
        user = self.scope.get("user")
        if not user or not user.is_authenticated or not user.is_active:
            logger.warning(f"Rejected join-admin from unauthenticated socket {self.channel_name}")
            await self.send_error("Authentication required")
            return

        await self.join(STAFF_GROUP)
        logger.info(f"Staff {user.username} joined the staff room")
        await self.send_event("joined", {"room": STAFF_GROUP})

    async def call_service(self, data):
        table_number = self.parse_table_number(data)
        if table_number is None:
            await self.send_error("A numeric table_number is required")
            return

        from tables.serializers import ServiceRequestSerializer

        # Same limits as POST /api/tables/<number>/service
        payload = {} if data.get("message") is None else {"message": data["message"]}
        serializer = ServiceRequestSerializer(data=payload)
        if not serializer.is_valid():
            logger.warning(f"Rejected call-service for table {table_number}: {serializer.errors}")
            await self.send_error(str(serializer.errors["message"][0]))
            return

        try:
            call = await self.request_service(table_number, serializer.validated_data.get("message"))
        except TablesideError as e:
            await self.send_error(str(e))
            return

        await self.send_event(
            "service-requested",
            {"id": call.pk, "table_number": table_number, "message": call.message},
        )

    # Channel layer handlers

    async def broadcast_event(self, event):
        """Relay a NotificationService event to this socket."""
        await self.send_event(event["event"], event["data"])

    # Helpers

    async def join(self, group):
        if group not in self.joined_groups:
            await self.channel_layer.group_add(group, self.channel_name)
            self.joined_groups.add(group)

    async def send_event(self, event, data):
        await self.send(text_data=json.dumps({"event": event, "data": data}, cls=DjangoJSONEncoder))

    async def send_error(self, message):
        await self.send_event("error", {"message": message})

    @staticmethod
    def parse_table_number(data):
        try:
            number = int(data.get("table_number"))
        except (TypeError, ValueError):
            return None
        return number if number > 0 else None

    @database_sync_to_async
    def table_exists(self, table_number):
        from tables.models import Table

        return Table.objects.filter(number=table_number).exists()

    @database_sync_to_async
    def request_service(self, table_number, message):
        table_service = apps.get_app_config("tables").table_service
        return table_service.request_service(table_number, message)
