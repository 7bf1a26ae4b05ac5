"""Exceptions raised by the rosemary app and mapped to HTTP responses in main."""


class RosemaryError(Exception):
    """Base class for application errors."""


class ValidationError(RosemaryError):
    """Submitted location data failed validation.

    ``details`` maps field names to one message each. A form-level message,
    when present, is stored under the ``form`` key.
    """

    def __init__(self, details: dict[str, str], form_error: str | None = None):
        self.details = dict(details)
        self.form_error = form_error
        if form_error:
            self.details['form'] = form_error
        super().__init__('Validation failed')


class StorageError(RosemaryError):
    """The location store could not complete a read or write."""


class UploadError(RosemaryError):
    """A photo could not be written to the blob area."""


class InvalidBodyError(RosemaryError):
    """The request body could not be parsed."""
