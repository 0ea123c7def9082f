"""Error taxonomy for the planboard core."""


class PlanboardError(Exception):
    """Base class for all planboard errors."""


class InvalidKey(PlanboardError, ValueError):
    """A date key does not match the YYYY-MM-DD pattern or names no real date."""


class NotFound(PlanboardError, LookupError):
    """A mutation targeted an id that does not exist."""


class ParseFailure(PlanboardError, ValueError):
    """Stored or imported content is not a well-formed task array."""


class VirtualBookingError(PlanboardError):
    """A task-derived booking was targeted by a manual booking operation."""
