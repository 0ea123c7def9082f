"""Adapters - I/O implementations of ports."""

from .json_storage import JsonTaskStorage, JsonBookingStorage
from .file_transfer import FileTransfer
from .local_auth import LocalAuth, User

__all__ = [
    "JsonTaskStorage",
    "JsonBookingStorage",
    "FileTransfer",
    "LocalAuth",
    "User",
]
