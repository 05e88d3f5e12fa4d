"""
Exceptions raised by the simulation core.

None of these are fatal: the integrator and the result store stay fully
usable after any of them.
"""


class ValidationError(ValueError):
    """Malformed simulation parameters, detected before any integration."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r}: {reason}")


class StoreRejection(Exception):
    """A trajectory was not accepted by the result store."""
    reason = None


class DuplicateError(StoreRejection):
    """Identical simulation parameters are already stored."""
    reason = 'duplicate'


class CapacityError(StoreRejection):
    """The result store is full."""
    reason = 'capacity'
