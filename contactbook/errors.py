# contactbook/errors.py
from __future__ import annotations

from typing import Dict, Optional

from starlette import status


class ContactBookError(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> Dict:
        return {"error": self.message}


class ValidationError(ContactBookError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, details: Dict[str, str], message: Optional[str] = None):
        self.details = dict(details)
        super().__init__(message)

    def to_dict(self) -> Dict:
        return {"error": self.message, "details": self.details}


class DuplicateEmail(ContactBookError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Contact already exists"


class NotFound(ContactBookError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Contact not found"


class BadRequest(ContactBookError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


class StorageFault(ContactBookError):
    """
    Any driver or I/O failure. The public message stays generic; the
    underlying error is kept on ``cause`` for the server log.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__()
