# storefront/errors.py
from typing import Optional


class StoreError(Exception):
    """Base error for the catalog service.

    Every subclass maps to one HTTP status; the message is sent to the client
    verbatim as ``{"error": message}``.
    """

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(StoreError):
    status_code = 404

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class ValidationFailure(StoreError):
    status_code = 400


class SignupRejected(StoreError):
    status_code = 400


class DuplicateIdentity(StoreError):
    status_code = 422

    def __init__(
        self,
        message: str = (
            "A user with this email address has already been registered. "
            "Please try signing in instead."
        ),
    ):
        super().__init__(message)


class UpstreamFailure(StoreError):
    """Blob sink, identity provider or catalog backend failed."""

    status_code = 500
