BOTH_SOURCES_UNAVAILABLE = (
    "Both external and local APIs are unavailable. "
    "Please check your connection and ensure backup data exists."
)


class GhibliBackupError(Exception):
    """Base class for every error raised by this package."""


class InvalidEndpointError(GhibliBackupError, ValueError):
    pass


class SourceError(GhibliBackupError):
    """A single source (external API or backup) failed to produce JSON."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class SourceTimeoutError(SourceError):
    pass


class SourceTransportError(SourceError):
    pass


class SourceStatusError(SourceError):
    def __init__(self, message: str, status_code: int, url: str = "") -> None:
        super().__init__(message, url=url)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class SourceParseError(SourceError):
    pass


class BackupUnavailableError(GhibliBackupError):
    """Terminal failure: neither the external API nor the backup answered."""

    def __init__(self, message: str = BOTH_SOURCES_UNAVAILABLE) -> None:
        super().__init__(message)


class ResourceNotFoundError(GhibliBackupError, LookupError):
    def __init__(self, endpoint: str) -> None:
        super().__init__(f"Resource not found: {endpoint}")
        self.endpoint = endpoint
