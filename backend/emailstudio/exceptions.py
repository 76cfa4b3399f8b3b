"""
Domain errors raised by the email asset services.

Routers never build HTTP errors for these by hand; main.py registers one
handler that turns any EmailStudioError into {"detail": message}.
"""
from typing import Optional


class EmailStudioError(Exception):
    """Base exception for the email asset backend."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(EmailStudioError):
    """Raised when a campaign, brand guide or email asset does not exist."""

    status_code = 404


class AccessDeniedError(EmailStudioError):
    """Raised when a record exists but belongs to another user."""

    status_code = 403


class PreconditionError(EmailStudioError):
    """Raised when a request cannot start; no generation work has been done."""

    status_code = 400


class NoEmailChannelError(PreconditionError):
    """Raised when the campaign has no enabled email channel."""

    def __init__(self):
        super().__init__("No email channel enabled for this campaign")


class NoGeneratedContentError(PreconditionError):
    """Raised when template mode has no previously generated email content."""

    def __init__(self):
        super().__init__("No generated content found. Please generate campaign assets first.")


class NothingToUndoError(PreconditionError):
    """Raised when undo is requested on an asset without edit history."""

    status_code = 409

    def __init__(self, asset_id):
        super().__init__(f"Email asset {asset_id} has no edit history to undo")


class GenerationError(EmailStudioError):
    """Raised when the text generation capability fails for one request."""

    status_code = 502


class GenerationFailedError(EmailStudioError):
    """Raised when a whole generation request produced no assets."""

    status_code = 422


class UnsupportedExportFormatError(EmailStudioError):
    """Raised for export formats outside ExportFormat.ALL."""

    status_code = 400

    def __init__(self, export_format: str):
        super().__init__(f"Unsupported format: {export_format}")
        self.export_format = export_format
