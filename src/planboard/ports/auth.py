"""Authentication interface."""

from typing import Protocol


class AuthProvider(Protocol):
    """Interface for the local sign-in gate."""

    def login(self, email: str, password: str) -> bool:
        """Start a session. Returns False if the credentials are rejected."""
        ...

    def logout(self) -> None:
        """End the current session."""
        ...
