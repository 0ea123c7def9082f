"""Manual booking persistence interface."""

from typing import Protocol

from planboard.core.bookings import Booking


class BookingStorage(Protocol):
    """Interface for the persisted manual booking map."""

    def load_bookings(self) -> dict[str, list[Booking]]:
        """Load date key -> bookings. Malformed or missing data yields an empty map."""
        ...

    def save_bookings(self, bookings: dict[str, list[Booking]]) -> None:
        """Overwrite the stored map."""
        ...
