"""Exceptions raised by chartgen."""


class ChartError(Exception):
    """Base class for chartgen errors."""


class InvalidArgumentError(ChartError, ValueError):
    """An argument was rejected (disposed font, malformed color, blank id)."""


class UnsupportedOperationError(ChartError, NotImplementedError):
    """The operation is not available on the current render target."""


class CellNotFoundError(InvalidArgumentError, KeyError):
    """No legend cell was produced for the key by the last packing pass."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""
