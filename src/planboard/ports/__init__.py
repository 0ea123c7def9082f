"""Ports - interfaces/protocols for external dependencies."""

from .task_storage import TaskStorage
from .booking_storage import BookingStorage
from .transfer import TaskTransfer
from .auth import AuthProvider

__all__ = [
    "TaskStorage",
    "BookingStorage",
    "TaskTransfer",
    "AuthProvider",
]
