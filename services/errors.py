"""
Error taxonomy for Prompt2App.

Every error carries the HTTP status it maps to and a message that is safe to
show to the end user. ``index.py`` turns these into ``{"error": message}``
responses.
"""


class AppError(Exception):
    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed request input."""
    status_code = 400
    default_message = "Invalid request"


class GenerationError(AppError):
    """The generation backend failed or returned unusable content."""
    status_code = 500
    default_message = "Error generating code with Gemini API"


class PersistenceError(AppError):
    """The key-value store could not be written."""
    status_code = 500
    default_message = "Failed to save app"


class ExportError(AppError):
    """The download archive could not be built."""
    status_code = 500
    default_message = "Failed to create download file"


class NotFoundError(AppError):
    status_code = 404
    default_message = "App not found"
