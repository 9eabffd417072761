# app/client/exceptions.py


class StorefrontError(Exception):
    """Base class for errors raised by the storefront client."""


class StorageError(StorefrontError):
    """Local key/value storage could not be written."""


class ApiError(StorefrontError):
    """
    The backend answered with an error status, or could not be reached.

    `message` is the user-facing text taken from the response body
    (`detail` / `message`) when there is one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: object | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials (HTTP 401 / 403)."""


class NetworkError(ApiError):
    """Transport failure: the request never got an HTTP response."""


class CartOperationError(StorefrontError):
    """
    A cart mutation failed while signed in. The message is meant to be
    shown to the customer; local cart state was left untouched.
    """
