"""
WebSocket Tests

Customers join their table's room, staff join the staff room with a token,
and events published by the services reach the right sockets.
"""
from decimal import Decimal

import pytest
from asgiref.sync import sync_to_async
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.apps import apps

from tableside.asgi import application

WS_PATH = "/ws/notifications/"


@database_sync_to_async
def create_table(number=5):
    from tables.models import Table

    return Table.objects.create(number=number, capacity=4, location="Main Dining")


@database_sync_to_async
def create_staff(username="waiter", is_active=True):
    from users.models import User
    from users.services import UserService

    user = User.objects.create_user(
        username=username, password="waiter123", role=User.Role.STAFF, is_active=is_active
    )
    return user, UserService.generate_access_token(user)


@database_sync_to_async
def service_call_count():
    from tables.models import ServiceCall

    return ServiceCall.objects.count()


async def connect(path=WS_PATH):
    communicator = WebsocketCommunicator(application, path)
    connected, _ = await communicator.connect()
    assert connected
    greeting = await communicator.receive_json_from()
    assert greeting["event"] == "connection-established"
    return communicator


# ============================================================================
# CONNECTION & ROOMS
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestConnection:
    async def test_anyone_can_connect(self):
        communicator = await connect()

        await communicator.send_json_to({"action": "ping"})
        response = await communicator.receive_json_from()

        assert response["event"] == "pong"
        await communicator.disconnect()

    async def test_join_existing_table(self):
        await create_table(5)
        communicator = await connect()

        await communicator.send_json_to({"action": "join-table", "table_number": 5})
        response = await communicator.receive_json_from()

        assert response == {"event": "joined", "data": {"room": "table-5"}}
        await communicator.disconnect()

    async def test_join_unknown_table(self):
        communicator = await connect()

        await communicator.send_json_to({"action": "join-table", "table_number": 42})
        response = await communicator.receive_json_from()

        assert response["event"] == "error"
        assert response["data"]["message"] == "Table 42 not found"
        await communicator.disconnect()

    async def test_leave_table(self):
        await create_table(5)
        communicator = await connect()
        await communicator.send_json_to({"action": "join-table", "table_number": 5})
        await communicator.receive_json_from()

        await communicator.send_json_to({"action": "leave-table", "table_number": 5})
        response = await communicator.receive_json_from()

        assert response == {"event": "left", "data": {"room": "table-5"}}

        await get_channel_layer().group_send(
            "table-5", {"type": "broadcast.event", "event": "order-status-updated", "data": {}}
        )
        assert await communicator.receive_nothing()
        await communicator.disconnect()

    async def test_bad_frames_get_error_replies(self):
        communicator = await connect()

        await communicator.send_to(text_data="{not json")
        assert (await communicator.receive_json_from())["data"]["message"] == "Invalid JSON"

        await communicator.send_json_to({"action": "dance"})
        assert (await communicator.receive_json_from())["data"]["message"] == "Unknown action: dance"

        await communicator.send_json_to({"action": "join-table", "table_number": "five"})
        assert (await communicator.receive_json_from())["event"] == "error"

        await communicator.disconnect()


@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestStaffRoom:
    async def test_anonymous_cannot_join_staff_room(self):
        communicator = await connect()

        await communicator.send_json_to({"action": "join-admin"})
        response = await communicator.receive_json_from()

        assert response == {"event": "error", "data": {"message": "Authentication required"}}
        await communicator.disconnect()

    async def test_staff_token_joins_staff_room(self):
        _, token = await create_staff()
        communicator = await connect(f"{WS_PATH}?token={token}")

        await communicator.send_json_to({"action": "join-admin"})
        response = await communicator.receive_json_from()

        assert response == {"event": "joined", "data": {"room": "admin"}}
        await communicator.disconnect()

    async def test_deactivated_staff_token_rejected(self):
        _, token = await create_staff(username="former", is_active=False)
        communicator = await connect(f"{WS_PATH}?token={token}")

        await communicator.send_json_to({"action": "join-admin"})
        response = await communicator.receive_json_from()

        assert response["event"] == "error"
        await communicator.disconnect()

    async def test_garbage_token_treated_as_anonymous(self):
        communicator = await connect(f"{WS_PATH}?token=abc.def.ghi")

        await communicator.send_json_to({"action": "join-admin"})
        response = await communicator.receive_json_from()

        assert response["data"]["message"] == "Authentication required"
        await communicator.disconnect()


# ============================================================================
# EVENT DELIVERY
# ============================================================================

@pytest.mark.django_db(transaction=True)
@pytest.mark.asyncio
class TestEventDelivery:
    async def test_call_service_over_socket(self):
        """
        Scenario:
        - Customer socket sends call-service for table 5
        - Staff socket is in the staff room
        - Expected: customer gets an acknowledgement, staff get service-called
        """
        await create_table(5)
        _, token = await create_staff()

        staff = await connect(f"{WS_PATH}?token={token}")
        await staff.send_json_to({"action": "join-admin"})
        await staff.receive_json_from()

        customer = await connect()
        await customer.send_json_to({"action": "call-service", "table_number": 5, "message": "Water"})

        ack = await customer.receive_json_from()
        assert ack["event"] == "service-requested"
        assert ack["data"]["message"] == "Water"

        alert = await staff.receive_json_from()
        assert alert["event"] == "service-called"
        assert alert["data"]["table_number"] == 5
        assert alert["data"]["table_location"] == "Main Dining"

        assert await service_call_count() == 1
        await customer.disconnect()
        await staff.disconnect()

    async def test_call_service_for_unknown_table(self):
        communicator = await connect()

        await communicator.send_json_to({"action": "call-service", "table_number": 404})
        response = await communicator.receive_json_from()

        assert response == {"event": "error", "data": {"message": "Table 404 not found"}}
        await communicator.disconnect()

    async def test_call_service_rejects_overlong_message(self):
        """
        Scenario:
        - Socket sends call-service with a 501 character message
        - Expected: error reply, nothing stored, the socket keeps working

        Value: The socket applies the same limits as the HTTP service call
        """
        await create_table(5)
        communicator = await connect()

        await communicator.send_json_to(
            {"action": "call-service", "table_number": 5, "message": "x" * 501}
        )
        response = await communicator.receive_json_from()

        assert response["event"] == "error"
        assert "500" in response["data"]["message"]
        assert await service_call_count() == 0

        await communicator.send_json_to({"action": "ping"})
        assert (await communicator.receive_json_from())["event"] == "pong"
        await communicator.disconnect()

    async def test_new_order_reaches_staff_and_status_reaches_table(self):
        """
        End to end: orders placed and advanced through the services reach
        the staff room and the table room respectively.
        """
        from menu.models import MenuItem
        from orders.models import Order

        await create_table(5)
        _, token = await create_staff()
        burger = await database_sync_to_async(MenuItem.objects.create)(
            name="Burger", price=Decimal("10.00"), category=MenuItem.Category.MAIN_COURSES
        )

        staff = await connect(f"{WS_PATH}?token={token}")
        await staff.send_json_to({"action": "join-admin"})
        await staff.receive_json_from()

        customer = await connect()
        await customer.send_json_to({"action": "join-table", "table_number": 5})
        await customer.receive_json_from()

        intake = apps.get_app_config("orders").intake_service
        lifecycle = apps.get_app_config("orders").lifecycle_service

        order = await sync_to_async(intake.create_order)(5, [{"menu_item": burger.pk, "quantity": 2}])

        new_order = await staff.receive_json_from()
        assert new_order["event"] == "new-order"
        assert new_order["data"]["order"]["order_number"] == order.order_number
        assert new_order["data"]["order"]["total"] == "22.00"

        await sync_to_async(lifecycle.set_status)(order, Order.OrderStatus.PREPARING)

        update = await customer.receive_json_from()
        assert update["event"] == "order-status-updated"
        assert update["data"]["status"] == "preparing"
        assert update["data"]["order_id"] == str(order.pk)

        await customer.disconnect()
        await staff.disconnect()
