"""Error taxonomy for percent-lift."""


class PercentLiftError(Exception):
    """Base class for all percent-lift errors."""


class InvalidMeasurement(PercentLiftError, ValueError):
    """Non-positive or nonsensical body-metric input."""


class MissingMeasurement(InvalidMeasurement):
    """A measurement required for the calculation was not supplied."""


class InvalidState(PercentLiftError):
    """A session operation was called from a state that forbids it."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while workout is {state}")


class StoreFailure(PercentLiftError):
    """The record store could not complete an operation."""


class RecordNotFound(StoreFailure):
    """A record looked up by id does not exist."""

    def __init__(self, kind: str, record_id: int):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")
