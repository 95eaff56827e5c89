"""Error taxonomy shared by the request handlers and the thumbnail worker.

Request-side errors carry the HTTP status they map to; the app installs a single
handler that renders them as ``{"error": message}``. Ownership failures are raised
as :class:`NotFound` so callers cannot tell a foreign file from a missing one.
"""


class FilesManagerError(Exception):
    """Expected failure of an operation, rendered to the client."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(FilesManagerError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ValidationFailed(FilesManagerError):
    """Missing or invalid field; message names the field."""

    status_code = 400


class NotFound(FilesManagerError):
    status_code = 404

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class ThumbnailJobError(Exception):
    """Fatal job error; the queue marks the job failed."""


class MissingFileId(ThumbnailJobError):
    def __init__(self, message: str = "Missing fileId") -> None:
        super().__init__(message)


class MissingUserId(ThumbnailJobError):
    def __init__(self, message: str = "Missing userId") -> None:
        super().__init__(message)


class FileNotFound(ThumbnailJobError):
    def __init__(self, file_id: str) -> None:
        super().__init__(f"File not found: {file_id}")
