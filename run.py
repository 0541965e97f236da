#!/usr/bin/env python3
"""Run script for ChronosFlow."""

import os

import uvicorn

from chronosflow.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(
        "chronosflow.api.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "False").lower() == "true",
        log_config=None,
    )
