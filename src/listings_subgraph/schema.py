from __future__ import annotations

import os
from collections.abc import Sequence

from ariadne import SchemaBindable, load_schema_from_path
from ariadne.contrib.federation import make_federated_schema
from ariadne.exceptions import GraphQLFileSyntaxError
from graphql import GraphQLError, GraphQLSchema

from .errors import SchemaLoadError
from .resolvers import bindables as default_bindables


def load_subgraph_schema(
    path: str | os.PathLike[str],
    bindables: Sequence[SchemaBindable] | None = None,
) -> GraphQLSchema:
    """Read SDL from ``path`` and bind resolvers into a federated schema."""

    try:
        type_defs = load_schema_from_path(path)
    except OSError as exc:
        raise SchemaLoadError(f"Cannot read schema file {os.fspath(path)}: {exc}") from exc
    except GraphQLFileSyntaxError as exc:
        raise SchemaLoadError(str(exc)) from exc

    if bindables is None:
        bindables = default_bindables

    try:
        return make_federated_schema(type_defs, *bindables)
    except (GraphQLError, TypeError, ValueError) as exc:
        raise SchemaLoadError(f"Invalid schema in {os.fspath(path)}: {exc}") from exc
