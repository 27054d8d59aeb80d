"""WireGuard Exporter - Errors"""
from typing import Optional


class ExporterError(Exception):
    """Base class for all exporter failures."""


class FormatError(ExporterError):
    """Malformed status dump or peer configuration input."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class CommandError(ExporterError):
    """The status dump command could not be run or failed."""
