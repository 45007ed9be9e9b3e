# barbershop/errors.py


class SchedulingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(SchedulingError):
    status_code = 404


class OverlapError(SchedulingError):
    """A shift collides with another shift of the same barber and date."""
    status_code = 409


class DuplicateError(SchedulingError):
    status_code = 409


class SlotUnavailableError(SchedulingError):
    """The requested appointment slot is already taken or not bookable."""
    status_code = 409


class PersistenceError(SchedulingError):
    """The store could not be read or written. The message is safe to show callers."""
    status_code = 500
