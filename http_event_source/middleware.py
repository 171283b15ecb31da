"""Body parsing middleware for the event source application."""

from typing import Any

from aiohttp import web

from http_event_source.events import BODY_KEY, flatten_multidict
from http_event_source.logging import get_logger

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _check_size(request: web.Request, size: int | None, limit: int) -> None:
    if size is not None and size > limit:
        logger.debug(f"Rejected {request.method} {request.path}: body of {size} bytes exceeds {limit}")
        raise web.HTTPRequestEntityTooLarge(max_size=limit, actual_size=size)


async def parse_body(request: web.Request, request_body_limit: int, file_size_limit: int) -> Any:
    """
    Parse a JSON or URL-encoded request body.

    Bodies of any other content type are left unread and parse to ``{}``.

    Raises:
        web.HTTPRequestEntityTooLarge: If the body exceeds its limit
        web.HTTPBadRequest: If a JSON body does not decode
    """
    if not request.body_exists:
        return {}

    content_type = request.content_type
    if content_type == JSON_CONTENT_TYPE or content_type.endswith("+json"):
        limit = file_size_limit
    elif content_type == FORM_CONTENT_TYPE:
        limit = request_body_limit
    else:
        return {}

    _check_size(request, request.content_length, limit)
    raw = await request.read()
    _check_size(request, len(raw), limit)

    if content_type == FORM_CONTENT_TYPE:
        return flatten_multidict(await request.post())

    if not raw.strip():
        return {}
    try:
        return await request.json()
    except ValueError as exc:
        raise web.HTTPBadRequest(text=f"Invalid JSON body: {exc}") from exc


def body_parser_middleware(request_body_limit: int, file_size_limit: int):
    """Create the middleware that stores the parsed body under ``request[BODY_KEY]``."""

    @web.middleware
    async def body_parser(request: web.Request, handler):
        request[BODY_KEY] = await parse_body(request, request_body_limit, file_size_limit)
        return await handler(request)

    return body_parser
