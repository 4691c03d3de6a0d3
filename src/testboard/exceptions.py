"""Shared exceptions for the testboard package."""


class TestboardError(Exception):
    """Base class for all testboard errors."""


class ReportFormatError(TestboardError):
    """Raised when a raw report does not have the expected structure.

    The normalizer recovers from this error by serving the fixture dataset,
    so it never reaches callers of ``ReportNormalizer.normalize``.
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        location = f" at {path}" if path else ""
        super().__init__(f"Malformed report{location}: {message}")


class ReportLoadError(TestboardError):
    """Raised when a report cannot be read from its storage location."""

    def __init__(self, message: str, cause: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code
