"""
Domain exceptions for the submission pipeline.
"""


class InputError(Exception):
    """
    Raised when a submission field is missing, empty or not a string.

    Attributes:
        field: Name of the offending field (e.g. "telephone", "captcha")
    """

    def __init__(self, field: str, message: str = ''):
        self.field = field
        super().__init__(message or f"Missing or empty field: {field}")


class RenderError(Exception):
    """Raised when the notification template cannot be rendered."""
    pass
