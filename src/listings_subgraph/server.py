"""Process entrypoint: load the schema, bind the port and serve."""

from __future__ import annotations

import logging
import socket

import uvicorn
from pydantic import ValidationError

from .config import Settings, get_settings
from .errors import StartupError
from .logging import configure_logging
from .main import GRAPHQL_PATH, create_app
from .schema import load_subgraph_schema

logger = logging.getLogger(__name__)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on ``host:port``; a port already in use is fatal."""

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
        sock.listen()
    except OSError as exc:
        sock.close()
        raise StartupError(f"Cannot listen on {host}:{port}: {exc.strerror or exc}") from exc

    sock.set_inheritable(True)
    return sock


def listening_url(sock: socket.socket, host: str) -> str:
    port = sock.getsockname()[1]
    display_host = "localhost" if host in ("0.0.0.0", "::", "") else host
    if ":" in display_host:
        display_host = f"[{display_host}]"
    return f"http://{display_host}:{port}{GRAPHQL_PATH}"


def run(settings: Settings) -> None:
    configure_logging(settings.log_level)

    schema = load_subgraph_schema(settings.schema_path)
    app = create_app(schema, settings=settings)

    sock = bind_socket(settings.host, settings.port)
    try:
        logger.info(
            "🚀 Subgraph %s running at %s",
            settings.subgraph_name,
            listening_url(sock, settings.host),
        )
        config = uvicorn.Config(app, log_level=settings.log_level.lower())
        uvicorn_server = uvicorn.Server(config)
        uvicorn_server.run(sockets=[sock])
        if not uvicorn_server.started:
            raise StartupError(f"Subgraph {settings.subgraph_name} failed to start")
    finally:
        sock.close()


def main(settings: Settings | None = None) -> None:
    try:
        run(settings or get_settings())
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(1) from exc
    except StartupError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
