"""
Domain exceptions for apexscan.

Malformed Apex source is expected input and never raises out of a scan.
Exceptions are reserved for wiring defects and invalid settings.
All application errors inherit from ApexScanError.
"""


class ApexScanError(Exception):
    """Base class for all apexscan exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(ApexScanError):
    """Raised when a module, registry or setting is wired incorrectly."""

    pass


class ApexParseError(ApexScanError):
    """Raised by the tree builder on syntax errors (never leaves the provider)."""

    def __init__(self, message: str, line: int = 0, column: int = 0, context: dict = None):
        super().__init__(message, context)
        self.line = line
        self.column = column
