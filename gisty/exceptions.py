"""Gist service exceptions and FastAPI exception handlers."""

from fastapi import Request
from fastapi.responses import JSONResponse


class GistError(Exception):
    """Base class for every error raised by the gist service."""


class GistValidationError(GistError):
    """Raised before any I/O when a request's inputs are unusable."""


class EmptyUsernameError(GistValidationError):
    def __init__(self):
        super().__init__("username cannot be empty")


class EmptyTokenError(GistValidationError):
    def __init__(self):
        super().__init__("token cannot be empty")


class BadUsernameError(GistValidationError):
    """Raised when the username contains a space."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"bad username: '{username}'")


class PaginationError(GistValidationError):
    """Raised when per_page is not positive or page is negative."""

    def __init__(self, per_page: int, page: int):
        self.per_page = per_page
        self.page = page
        super().__init__(f"invalid pagination: per_page={per_page}, page={page}")


class EmptyIDError(GistValidationError):
    def __init__(self):
        super().__init__("id cannot be empty")


class GistNotFoundError(GistError):
    """Raised when the API answers 404 for a single gist."""

    def __init__(self, gist_id: str):
        self.gist_id = gist_id
        super().__init__(f"gist '{gist_id}' not found")


class GistTransportError(GistError):
    """Raised when the API could not be reached. The cause is chained."""

    def __init__(self, url: str, message: str, timeout: bool = False):
        self.url = url
        self.message = message
        self.timeout = timeout
        super().__init__(f"transport error: {message}")


class GistDecodeError(GistError):
    """Raised when a response body is not the expected JSON. The cause is chained."""

    def __init__(self, url: str, message: str):
        self.url = url
        self.message = message
        super().__init__(f"decoding response: {message}")


class CacheWriteError(GistError):
    """
    Raised when a freshly fetched gist could not be written to the cache.

    The fetched document is still available on ``document``.
    """

    def __init__(self, gist_id: str, document, message: str):
        self.gist_id = gist_id
        self.document = document
        self.message = message
        super().__init__(f"caching gist '{gist_id}': {message}")


async def gist_validation_error_handler(
    request: Request,
    exc: GistValidationError,
) -> JSONResponse:
    """Handle GistValidationError."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "invalid_request",
            "message": str(exc),
            "detail": type(exc).__name__,
        },
    )


async def gist_not_found_handler(
    request: Request,
    exc: GistNotFoundError,
) -> JSONResponse:
    """Handle GistNotFoundError."""
    return JSONResponse(
        status_code=404,
        content={
            "error": "gist_not_found",
            "message": f"Gist '{exc.gist_id}' not found",
            "detail": "The specified gist does not exist on GitHub",
        },
    )


async def gist_transport_error_handler(
    request: Request,
    exc: GistTransportError,
) -> JSONResponse:
    """Handle GistTransportError."""
    return JSONResponse(
        status_code=504 if exc.timeout else 502,
        content={
            "error": "github_unreachable",
            "message": "Error communicating with GitHub API",
            "detail": exc.message,
        },
    )


async def gist_decode_error_handler(
    request: Request,
    exc: GistDecodeError,
) -> JSONResponse:
    """Handle GistDecodeError."""
    return JSONResponse(
        status_code=502,
        content={
            "error": "bad_github_response",
            "message": "GitHub API returned an unexpected response",
            "detail": exc.message,
        },
    )
