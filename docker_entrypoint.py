#!/usr/bin/env python
"""Docker entrypoint script to run the application."""

import os
import sys

# Add the current directory to the path
sys.path.insert(0, os.path.abspath("."))

# Run uvicorn
if __name__ == "__main__":
    import uvicorn

    from app.config import config

    uvicorn.run("app.main:app", host=config.server.host, port=config.server.port)
