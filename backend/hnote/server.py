"""
hnote Backend — Process Entry Point
====================================

What:  The `hnote` console script: configure logging, load TLS material,
       build the app and serve it with uvicorn until SIGINT/SIGTERM.
How:   Startup problems surface as StartupError (TLS files) or as a failed
       lifespan startup (store unreachable); `run()` turns either into exit
       status 1. No retries.

Shutdown:
    uvicorn stops accepting connections on SIGINT/SIGTERM and waits up to
    `shutdown_grace_period` seconds for in-flight requests before closing
    them; the app lifespan then closes the store's connection pool.
"""

import logging
import ssl
import sys
from typing import Any, Dict, Optional

import uvicorn

from hnote.config import Settings, settings as default_settings
from hnote.exceptions import StartupError
from hnote.main import create_app, setup_logging

logger = logging.getLogger(__name__)


def load_tls_options(config: Settings) -> Dict[str, Any]:
    """
    uvicorn keyword arguments for the configured transport.

    Returns an empty dict when TLS is disabled.

    Raises:
        StartupError: certificate or key file missing or unreadable
    """
    if not config.tls_enabled:
        return {}

    options: Dict[str, Any] = {}
    for option, path in config.tls_paths().items():
        try:
            with path.open("rb") as handle:
                handle.read(1)
        except OSError as e:
            raise StartupError(
                message=f"cannot read TLS file {path}",
                context={"option": option, "path": str(path), "error": str(e)},
            ) from e
        options[option] = str(path)
    return options


def build_server(config: Settings) -> uvicorn.Server:
    """
    Assemble a uvicorn server for a freshly created app.

    Raises:
        StartupError: TLS material missing, unreadable or not a valid cert/key pair
    """
    tls_options = load_tls_options(config)
    server_config = uvicorn.Config(
        create_app(config=config),
        host=config.backend_host,
        port=config.backend_port,
        lifespan="on",
        log_config=None,
        timeout_keep_alive=config.keep_alive_timeout,
        timeout_graceful_shutdown=config.shutdown_grace_period,
        **tls_options,
    )
    try:
        server_config.load()
    except (ssl.SSLError, OSError) as e:
        raise StartupError(
            message="cannot load TLS certificate/key pair",
            context={"error": str(e)},
        ) from e
    return uvicorn.Server(server_config)


def run(config: Optional[Settings] = None) -> int:
    """Serve until shutdown; returns the process exit status."""
    config = config or default_settings
    setup_logging(config.log_level)

    try:
        server = build_server(config)
    except StartupError as e:
        logger.critical("Startup failed: %s | Context: %s", e.message, e.context)
        return 1

    scheme = "https" if config.tls_enabled else "http"
    logger.info("listening on %s://%s:%d", scheme, config.backend_host, config.backend_port)
    try:
        server.run()
    except SystemExit as e:
        # uvicorn exits the process itself when the lifespan startup fails
        logger.critical("Startup failed: application did not start (uvicorn exit %s)", e.code)
        return 1

    if not server.started:
        logger.critical("Startup failed: application did not start (see errors above)")
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
