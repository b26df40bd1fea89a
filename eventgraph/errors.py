"""
Error taxonomy for the event graph.

Every service operation validates before it mutates, so any of these
errors leaves the in-memory graph unchanged.
"""


class EventGraphError(Exception):
    """Base class for all event graph errors."""


class NotFoundError(EventGraphError, LookupError):
    """A referenced user, event or category does not exist."""


class AlreadyExistsError(EventGraphError, ValueError):
    """An add operation targets an id that is already taken."""


class InvalidRatingError(EventGraphError, ValueError):
    """A rating is not a number in the accepted range."""


class InvalidOperationError(EventGraphError, ValueError):
    """The request is well-formed but not allowed (e.g. self-friendship)."""


class PersistenceError(EventGraphError):
    """Snapshot could not be written or read."""
