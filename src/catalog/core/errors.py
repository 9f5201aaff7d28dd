"""Domain error taxonomy shared by the core services.

Services raise these instead of ``HTTPException``; the HTTP layer maps each
one to a response using ``status_code`` and ``message``.
"""


class CatalogError(Exception):
    """Base class for every failure surfaced by the core services."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(CatalogError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CatalogError):
    status_code = 409
    default_message = "Conflict"


class StorageError(CatalogError):
    """The object store rejected or failed a request."""

    status_code = 502
    default_message = "Object storage request failed"


class InvalidInputError(CatalogError):
    """Input that passed request parsing but cannot be processed."""

    status_code = 422
    default_message = "Invalid input"
