"""Endpoint URL construction for the gists API."""

from urllib.parse import quote, urlencode


def build_list_url(api_base: str, username: str, token: str, page: int, per_page: int) -> str:
    """Return the encoded URL for one page of a user's gists."""
    query = urlencode(
        [
            ("access_token", token),
            ("page", str(page)),
            ("per_page", str(per_page)),
        ]
    )
    return f"{api_base}/users/{quote(username, safe='')}/gists?{query}"


def build_gist_url(api_base: str, gist_id: str) -> str:
    """Return the URL of a single gist, without credentials."""
    return f"{api_base}/gists/{quote(gist_id, safe='')}"


def with_token(url: str, token: str) -> str:
    """Append the access token to a URL that carries no query yet."""
    return f"{url}?{urlencode({'access_token': token})}"
