"""
Booking-domain errors.

Services raise these; the app-level error handler turns them into
``{"error": message}`` JSON with ``status_code``. ``kind`` is the stable,
machine-readable name (used in logs and audit metadata).
"""


class BookingError(Exception):
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return self.__class__.__name__


class ValidationError(BookingError):
    default_message = "Invalid request"


class Unauthorized(BookingError):
    status_code = 401
    default_message = "Authentication required"


class NotFound(BookingError):
    status_code = 404
    default_message = "Booking not found"


class SlotNotFound(NotFound):
    default_message = "Time slot not found"


class Forbidden(BookingError):
    status_code = 403
    default_message = "Forbidden"


# Business-rule denials (terminal for the request, never retried)

class SlotCancelled(BookingError):
    default_message = "This session has been cancelled"


class SlotInPast(BookingError):
    default_message = "Cannot book a past session"


class SlotFull(BookingError):
    default_message = "This session is full"


class AlreadyBooked(BookingError):
    default_message = "You already have a booking for this session"


class BookingNotActive(BookingError):
    default_message = "Booking is not active"


class NoActiveMembership(BookingError):
    default_message = "No active membership"


class MonthlyCreditsExhausted(BookingError):
    default_message = "No credits remaining this month"


class PunchCardExhausted(BookingError):
    default_message = "No credits remaining on punch card"


class InvalidPlanConfiguration(BookingError):
    default_message = "Invalid membership configuration"
