class SeriesConfigError(ValueError):
    """Raised when series parameters are rejected before any rows are read."""


class UnknownMeasurementError(SeriesConfigError):
    """Raised when a measurement selector is not one of the known columns."""

    def __init__(self, value: object, known: tuple[str, ...]) -> None:
        self.value = value
        self.known = known
        super().__init__(
            f"Unknown measurement {value!r}. Available: {', '.join(known)}"
        )
