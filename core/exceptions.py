"""Business errors raised by the service layer.

Routers turn them into ``HTTPException`` using ``status_code`` and the message.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ServiceError):
    status_code = 400


class AccessDenied(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class NoActiveSubscription(ServiceError):
    status_code = 400

    def __init__(self, message: str = "No active subscription found"):
        super().__init__(message)


class RenewalTooEarly(ServiceError):
    status_code = 400

    def __init__(self, days_remaining: int, window_days: int):
        super().__init__(
            f"Renewal not allowed yet. You can renew within {window_days} days of expiry. "
            f"Days remaining: {days_remaining}"
        )
        self.days_remaining = days_remaining


class PaymentError(ServiceError):
    status_code = 400
