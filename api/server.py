"""Command-line launcher for the notes API."""

from __future__ import annotations

import os

import structlog
import uvicorn
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

APP_IMPORT_PATH = "api.app:app"


def _env_flag(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes")


def run_server(host: str | None = None, port: int | None = None, reload: bool | None = None):
    """
    Serve the API with uvicorn.

    Values from a local `.env` file are loaded into the environment first so
    the application settings and the reload worker both see them. Arguments
    left unset come from HOST, PORT and RELOAD.
    """
    load_dotenv()

    host = host or os.getenv("HOST", "0.0.0.0")
    port = port or int(os.getenv("PORT", "8000"))
    if reload is None:
        reload = _env_flag("RELOAD")

    logger.info("server_starting", host=host, port=port, reload=reload)

    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests itself
    uvicorn.run(
        APP_IMPORT_PATH,
        host=host,
        port=port,
        reload=reload,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run_server()
