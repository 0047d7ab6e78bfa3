class GradingError(Exception):
    """
    Base class for every failure raised by the submission and grading core.
    Each subclass carries the HTTP status the API layer answers with.
    """
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class PolicyDenied(GradingError):
    """The actor is not allowed to perform the action on this resource."""
    status_code = 403


class ValidationError(GradingError):
    """Malformed input or a request the current record state cannot accept."""
    status_code = 422


class NotFound(GradingError):
    status_code = 404


class ConcurrencyConflict(GradingError):
    """A concurrent writer won a race the database refused to serialize."""
    status_code = 409
