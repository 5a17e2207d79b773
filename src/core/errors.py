"""
Error taxonomy for the reading tracker core.

Every failure the core reports is a TrackerError subclass carrying the HTTP
status the web layer answers with. The web layer renders any TrackerError
as {"error": message}.
"""


class TrackerError(Exception):
    """Base class for all failures raised by the core."""
    status_code = 500

    def __init__(self, message: str = ''):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {'error': self.message}


class NotFound(TrackerError):
    """Unknown family or member."""
    status_code = 404


class DuplicateFamily(TrackerError):
    status_code = 400


class DuplicateMember(TrackerError):
    status_code = 400


class InvalidInput(TrackerError):
    """Missing or empty required field."""
    status_code = 400


class Unauthorized(TrackerError):
    """Admin password mismatch."""
    status_code = 401


class InvalidTarget(TrackerError):
    """Unknown member or part in a completion operation."""
    status_code = 400


class ContentLoadError(TrackerError):
    status_code = 500


class PersistenceError(TrackerError):
    """Read or write failure on the families data file."""
    status_code = 500
