"""Helper utilities for populating request context."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypedDict

from starlette.datastructures import Headers
from starlette.requests import Request

from .datasources import DataSourceFactory

USER_ID_HEADER = "userid"
USER_ROLE_HEADER = "userrole"


class RequestContext(TypedDict, total=False):
    user_id: str
    user_role: str


def build_request_context(headers: Mapping[str, str]) -> RequestContext:
    """Extract the caller's identity from request headers.

    Header names are matched case-insensitively. A missing header leaves the
    corresponding key out of the result.
    """

    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))

    context: RequestContext = {}
    user_id = headers.get(USER_ID_HEADER)
    if user_id is not None:
        context["user_id"] = user_id
    user_role = headers.get(USER_ROLE_HEADER)
    if user_role is not None:
        context["user_role"] = user_role
    return context


def make_context_value(
    data_source_factory: DataSourceFactory,
) -> Callable[..., dict[str, Any]]:
    def get_context_value(request: Request, _data: Any = None) -> dict[str, Any]:
        data_sources = data_source_factory()
        # Closed by DataSourceCleanupMiddleware once the response is sent.
        request.state.data_sources = data_sources
        return {
            "request": request,
            "data_sources": data_sources,
            **build_request_context(request.headers),
        }

    return get_context_value
