#!/usr/bin/env python3
"""Run script for capaplan."""

import logging

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "capaplan.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
