"""
Domain exceptions and the REST framework exception handler.
"""
import logging

from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class TablesideError(Exception):
    """Base exception for restaurant domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST


class ResourceNotFound(TablesideError):
    """Raised when a table, order, menu item or staff record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource, identifier=None, message=None):
        self.resource = resource
        self.identifier = identifier
        if message is None:
            message = f"{resource} not found"
            if identifier is not None:
                message = f"{resource} {identifier} not found"
        super().__init__(message)


class BusinessRuleViolation(TablesideError):
    """Raised when a request is well formed but breaks a restaurant rule."""


class MenuItemUnavailable(BusinessRuleViolation):
    """Raised when an order references a missing or unavailable menu item."""

    def __init__(self, menu_item_id, name=None, message=None):
        self.menu_item_id = menu_item_id
        if message is None:
            if name:
                message = f"Menu item not available: {name} ({menu_item_id})"
            else:
                message = f"Menu item not available: {menu_item_id}"
        super().__init__(message)


class InvalidStatusTransition(BusinessRuleViolation):
    """Raised when an order cannot move to the requested status."""

    def __init__(self, order, new_status, message=None):
        self.order = order
        self.new_status = new_status
        if message is None:
            message = f"Cannot move order {order.order_number} from {order.status} to {new_status}"
        super().__init__(message)


def tableside_exception_handler(exc, context):
    """
    Map domain exceptions onto HTTP responses.

    REST framework exceptions keep their default handling. Anything that is
    neither is logged with its traceback and answered with a generic 500 so
    no internal detail reaches the client.
    """
    request = context.get("request")
    path = getattr(request, "path", "")

    if isinstance(exc, TablesideError):
        logger.warning(f"{exc.__class__.__name__} on {path}: {exc}")
        return Response({"error": str(exc)}, status=exc.status_code)

    if isinstance(exc, ProtectedError):
        logger.warning(f"Protected delete rejected on {path}: {exc}")
        return Response(
            {"error": "This record is referenced by existing orders and cannot be deleted"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is not None:
        return response

    logger.error(f"Unhandled error on {path}: {exc}", exc_info=exc)
    return Response(
        {"error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
