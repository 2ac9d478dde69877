from __future__ import annotations


class SortVizError(Exception):
    """
    Base for user-recoverable errors.

    Raised and caught inside the session controller; `message` is what the
    presenter shows to the user.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCount(SortVizError):
    """
    Submitted count is not a positive integer.
    """

    def __init__(self, raw: object) -> None:
        super().__init__("Enter a valid positive number.")
        self.raw = raw


class ValueTooLarge(SortVizError):
    """
    Selected value is above the drill-down threshold.
    """

    def __init__(self, value: int, limit: int) -> None:
        super().__init__(f"Please select a value smaller or equal to {limit}.")
        self.value = value
        self.limit = limit


class SessionStateError(RuntimeError):
    """
    Controller entry point called in a phase that does not accept it.
    """
