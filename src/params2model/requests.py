"""Request-level wrappers: query strings and submitted forms.

Requests are duck-typed. Anything with a ``url`` attribute works for the
query-string helpers (Starlette/FastAPI ``Request``, httpx ``Request``, or a
plain object), and anything with an awaitable ``form()`` works for the form
helpers.
"""

from typing import Any, Protocol

import httpx

from .engine import parse_params, unwrap_result
from .schemas.result import ParseResult
from .utils.logging_setup import get_logger

logger = get_logger(__name__)


class HasURL(Protocol):
    url: Any


class HasForm(Protocol):
    def form(self) -> Any: ...


def search_params(request: HasURL) -> list[tuple[str, str]]:
    """Decoded query-string pairs of a request URL, in order."""
    url = httpx.URL(str(request.url))
    return url.params.multi_items()


def parse_search_params(request: HasURL, schema: Any) -> ParseResult:
    """Parse the query string of ``request.url`` against a schema."""
    return parse_params(search_params(request), schema)


async def parse_form_data(request: HasForm, schema: Any) -> ParseResult:
    """Await the request's form data, then parse it against a schema."""
    form = await request.form()
    logger.debug("Form data received", form_type=type(form).__name__)
    return parse_params(form, schema)


def parse_search_params_or_fail(request: HasURL, schema: Any) -> Any:
    """Like parse_search_params, but returns the data and raises on validation errors."""
    return unwrap_result(parse_search_params(request, schema))


async def parse_form_data_or_fail(request: HasForm, schema: Any) -> Any:
    """Like parse_form_data, but returns the data and raises on validation errors."""
    return unwrap_result(await parse_form_data(request, schema))
