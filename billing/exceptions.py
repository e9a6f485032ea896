from __future__ import annotations

from datetime import date


class SubscriptionError(ValueError):
    """Base exception for an invalid subscription state."""


class InvalidChargeError(SubscriptionError):
    def __init__(self, message: str = "Charge rate must be larger than 0") -> None:
        super().__init__(message)


class InvalidDateFormatError(SubscriptionError):
    """Raised when a start or end date is not valid dd/MM/yyyy text."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Please enter a valid {field} date in format (dd/MM/yyyy).")


class InvalidSubscriptionTypeError(SubscriptionError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Only daily, weekly, or monthly subscriptions are supported.")


class MissingFieldError(SubscriptionError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "Please ensure subscription type, start date and end date are being entered."
        )


class DateMismatchError(SubscriptionError):
    def __init__(self) -> None:
        super().__init__(
            "For daily subscription, the start date must be same as the end date."
        )


class DateOrderError(SubscriptionError):
    def __init__(self) -> None:
        super().__init__(
            "For weekly and monthly subscription, the end date must be after the start date."
        )


class AnchorMismatchError(SubscriptionError):
    """Raised when the end date does not land on the start date's anchor."""

    def __init__(self, unit: str, start_date: date, anchor: str) -> None:
        self.start_date = start_date
        self.anchor = anchor
        period = "weekly" if unit == "week" else "monthly"
        super().__init__(
            f"For {period} subscription, the day of {unit} of end date must be the same "
            f"as the start date ({start_date.isoformat()} - {anchor})."
        )


class DurationExceededError(SubscriptionError):
    def __init__(self, months: int, days: int, limit: int) -> None:
        self.months = months
        self.days = days
        super().__init__(f"You can only have maximum {limit} months subscription.")


class InvalidAnchorError(SubscriptionError):
    def __init__(self, anchor: str, expected: str) -> None:
        self.anchor = anchor
        self.expected = expected
        super().__init__(
            f"Day of subscription must be {expected!r} for this start date, got {anchor!r}."
        )
