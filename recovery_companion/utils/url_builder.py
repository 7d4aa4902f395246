"""
Database URL utilities
"""
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def build_async_url(sync_url: str) -> str:
    """
    Rewrite a postgres URL for the asyncpg driver

    postgres:// and postgresql+psycopg2:// both become postgresql+asyncpg://.
    sslmode is dropped from the query string because asyncpg rejects it;
    SSL is passed through connect_args instead.

    Args:
        sync_url: Original database URL

    Returns:
        Async-compatible database URL, or the input unchanged for
        non-postgres schemes
    """
    if not sync_url:
        return sync_url

    parts = urlsplit(sync_url)
    base_scheme = parts.scheme.split("+")[0]
    if not base_scheme.startswith("postgres"):
        return sync_url

    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    return urlunsplit(("postgresql+asyncpg", parts.netloc, parts.path, urlencode(query), parts.fragment))
