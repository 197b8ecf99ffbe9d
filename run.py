#!/usr/bin/env python3
"""Run the mlotasks reference API backend."""

import uvicorn

from mlotasks.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(
        "mlotasks.api.app:app",
        host="0.0.0.0",
        port=3000,
        reload=True
    )
