"""Typed exceptions for studio ledger failures.

Not-found is signalled by None/False returns, and input validation by
pydantic.ValidationError; these cover the remaining domain refusals.
"""


class StudioError(Exception):
    """Base class for studio domain errors."""


class InsufficientCreditsError(StudioError):
    """A message costs more WhatsApp credits than the studio has left."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient credits: need {required} but only {available} available"
        )
