#!/usr/bin/env python3
"""Startup script for the Deathwick game backend"""

import logging
import os

import uvicorn

logger = logging.getLogger(__name__)


def main():
    port = int(os.getenv("PORT", 8000))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info("Starting Deathwick backend on %s:%s", host, port)

    uvicorn.run(
        "deathwick_engine.ws.server:app",
        host=host,
        port=port,
        reload=os.getenv("RELOAD", "false").lower() == "true",
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )


if __name__ == "__main__":
    main()
