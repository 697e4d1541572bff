"""Run the relay with uvicorn: ``python -m signal_relay``."""
from __future__ import annotations

import logging
from pathlib import Path

import uvicorn

from .core.config import settings
from .core.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(settings.log_level)

    options: dict[str, object] = {"host": settings.host, "port": settings.http_port}
    scheme = "ws"
    certs_present = Path(settings.ssl_keyfile).is_file() and Path(settings.ssl_certfile).is_file()
    if settings.enable_https and not certs_present:
        logger.warning("SSL key/certificate not found; serving plain WebSocket only")
    elif settings.enable_https:
        options.update(
            port=settings.https_port,
            ssl_keyfile=settings.ssl_keyfile,
            ssl_certfile=settings.ssl_certfile,
        )
        scheme = "wss"

    logger.info("Signaling relay listening on %s://%s:%s/ws", scheme, settings.host, options["port"])
    uvicorn.run("signal_relay.main:app", log_config=None, **options)


if __name__ == "__main__":
    main()
