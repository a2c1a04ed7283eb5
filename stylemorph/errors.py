"""Error types raised by the studio core."""


class StudioError(Exception):
    """Base class for every error the studio surfaces to its caller."""


class ValidationError(StudioError):
    """Request rejected before reaching the synthesis service."""


class NotFoundError(StudioError):
    """No asset, draft or record with the given id."""


class BusyError(StudioError):
    """A gated operation is already in flight."""


class ServiceError(StudioError):
    """The external synthesis service failed.

    Args:
        message: Human readable summary
        operation: Name of the service call that failed
        failed_angles: For batch try-on, the angles whose calls failed
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        failed_angles: list | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.failed_angles = failed_angles or []
