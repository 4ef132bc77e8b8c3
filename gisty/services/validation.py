"""Input checks run before any request is sent."""

from gisty.exceptions import (
    BadUsernameError,
    EmptyIDError,
    EmptyTokenError,
    EmptyUsernameError,
    PaginationError,
)


def validate_list_request(username: str, token: str, per_page: int, page: int) -> None:
    """
    Check the inputs of a list request.

    Checks run in this order and the first failure is raised:
    token, username, spaces in username, pagination.

    Raises:
        EmptyTokenError: token is empty
        EmptyUsernameError: username is empty
        BadUsernameError: username contains a space
        PaginationError: per_page <= 0 or page < 0
    """
    if token == "":
        raise EmptyTokenError()
    if username == "":
        raise EmptyUsernameError()
    if " " in username:
        raise BadUsernameError(username)
    if per_page <= 0 or page < 0:
        raise PaginationError(per_page, page)


def validate_gist_id(gist_id: str) -> None:
    """Raise EmptyIDError for an empty gist id."""
    if gist_id == "":
        raise EmptyIDError()
