"""Error taxonomy for check-in and checkout.

Services raise these; ``kiosk.main`` maps them onto HTTP responses with
the ``{"detail": ...}`` body FastAPI uses for its own errors.
"""


class KioskError(Exception):
    """Base class for errors that carry an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(KioskError):
    """Missing or malformed required fields."""

    status_code = 400


class NotFound(KioskError):
    """A person, family, event or pickup code does not exist."""

    status_code = 404


class Conflict(KioskError):
    """The request collides with existing state."""

    status_code = 409


class AlreadyRedeemed(Conflict):
    """The pickup code has already been used for a checkout."""

    # The kiosk screens expect 400 here, not 409
    status_code = 400

    def __init__(self, message: str = "Code already redeemed"):
        super().__init__(message)


class RetryExhausted(KioskError):
    """No acceptable result was produced within the allowed attempts."""

    status_code = 500

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts
