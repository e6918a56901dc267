"""Errors raised by the stress engine and scenario catalog."""


class StressTestError(ValueError):
    """Base class for stress engine failures."""


class UnknownScenarioKind(StressTestError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown stress scenario: {key!r}")


class InvalidInput(StressTestError):
    """A numeric input was missing, non-numeric or non-finite."""
