"""
Service-level errors for inventory and document operations.

Services raise these; API views turn them into responses with
``error_response``. Every error carries a human-readable message.
"""
from rest_framework import status
from rest_framework.response import Response


class InventoryError(Exception):
    """Base class for all business-rule failures"""
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self):
        data = {'error': self.message}
        data.update(self.extra)
        return data


class NotFoundError(InventoryError):
    http_status = status.HTTP_404_NOT_FOUND


class ValidationError(InventoryError):
    http_status = status.HTTP_400_BAD_REQUEST


class InsufficientStockError(InventoryError):
    http_status = status.HTTP_409_CONFLICT


class InvalidStateError(InventoryError):
    http_status = status.HTTP_409_CONFLICT


class ReferentialConflictError(InventoryError):
    """Plain delete blocked by dependent rows; the caller may offer force delete."""
    http_status = status.HTTP_409_CONFLICT

    def __init__(self, message, dependents=None):
        super().__init__(message, can_force_delete=True, dependents=dependents or {})
        self.dependents = dependents or {}


def error_response(exc):
    """Build the API response for a service error"""
    return Response(exc.to_dict(), status=exc.http_status)
