#!/usr/bin/env python3
"""Startup script - reads PORT and HOST from environment."""
import logging
import os

import uvicorn

logger = logging.getLogger("recovery_companion.startup")


def main():
    port = int(os.environ.get("PORT", "8000"))
    host = os.environ.get("HOST", "0.0.0.0")

    from recovery_companion.main import app as fastapi_app
    logger.info("Starting Recovery Companion backend on %s:%s", host, port)
    uvicorn.run(fastapi_app, host=host, port=port)


if __name__ == "__main__":
    main()
