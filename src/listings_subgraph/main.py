from __future__ import annotations

from functools import partial

from ariadne.asgi import GraphQL
from graphql import GraphQLSchema
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Mount
from starlette.types import ASGIApp, Receive, Scope, Send

from .config import Settings, get_settings
from .context import make_context_value
from .datasources import DataSourceFactory, DataSources, build_data_sources

GRAPHQL_PATH = "/graphql"


class DataSourceCleanupMiddleware:
    """Close the datasources a request created once it has been handled."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        try:
            await self.app(scope, receive, send)
        finally:
            data_sources = state.pop("data_sources", None)
            if isinstance(data_sources, DataSources):
                await data_sources.close()


def create_app(
    schema: GraphQLSchema,
    *,
    settings: Settings | None = None,
    data_source_factory: DataSourceFactory | None = None,
) -> Starlette:
    settings = settings or get_settings()
    if data_source_factory is None:
        data_source_factory = partial(build_data_sources, settings)
    graphql_app = GraphQL(
        schema,
        context_value=make_context_value(data_source_factory),
        debug=settings.debug,
    )
    return Starlette(
        routes=[Mount(GRAPHQL_PATH, graphql_app)],
        middleware=[Middleware(DataSourceCleanupMiddleware)],
    )
