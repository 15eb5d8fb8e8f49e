"""Errors raised while handling an upload.

Each error carries the HTTP status and the short message returned to the
client. The underlying cause, when there is one, is kept on ``__cause__``
for the server log only.
"""


class UploadError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UploadValidationError(UploadError):
    """The request or one of its files was rejected."""
    status_code = 400


class UploadStorageError(UploadError):
    """Writing to the upload directory failed."""
    status_code = 500
