"""Translation of Supabase client failures."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from scan_relay.domain.errors import StoreUnavailable


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise transport and PostgREST failures as StoreUnavailable."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        raise StoreUnavailable(f"{operation} failed: {exc}") from exc
