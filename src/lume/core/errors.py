"""Error taxonomy for the Lume backend.

Every error carries a user-facing message and the HTTP status the API layer
renders it with.  Route handlers let these propagate; the exception handlers
registered in :mod:`lume.api.main` turn them into JSON responses.
"""


class LumeError(Exception):
    """Base class for errors surfaced to API callers.

    The message is intended to be displayed directly to the user.
    """

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadValidationError(LumeError):
    """Raised when an upload is missing, too large, or of a disallowed type."""

    status_code = 400


class ItemNotFoundError(LumeError):
    """Raised when a wardrobe item identifier does not resolve."""

    status_code = 404

    def __init__(self, item_id: str):
        super().__init__("Item not found")
        self.item_id = item_id


class GenerationFailedError(LumeError):
    """Raised when the text-to-image service fails for any reason."""

    status_code = 500


class AuthenticationError(LumeError):
    """Raised when a bearer token is missing or cannot be verified."""

    status_code = 401


class OwnerMismatchError(LumeError):
    """Raised when a verified caller addresses another owner's items."""

    status_code = 403

    def __init__(self, message: str = "Not allowed to access this wardrobe"):
        super().__init__(message)


class StorageError(LumeError):
    """Raised when the database cannot complete a request."""

    status_code = 500
