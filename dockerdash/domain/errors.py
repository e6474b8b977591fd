class DashboardError(Exception):
    """Base for every failure that is reported to API clients as {success: false}."""

    status_code: int = 500
    in_use: bool = False

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class DaemonUnavailable(DashboardError):
    """The control socket is missing, not a socket, or not answering."""

    status_code = 503


class DaemonError(DashboardError):
    """The daemon was reachable but rejected the operation."""


class NotFound(DaemonError):
    status_code = 404


class ResourceInUse(DaemonError):
    """Image or volume removal refused because something still references it."""

    status_code = 409
    in_use = True


class InvalidInput(DashboardError):
    """Missing required field or unknown verb; raised before any daemon call."""

    status_code = 400
