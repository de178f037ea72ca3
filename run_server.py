#!/usr/bin/env python3
"""Serve the meta client HTTP API (query, run, meta-summary, expand) with uvicorn."""

import argparse
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AI Meta Client API server")
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"), help="Bind address")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")), help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument(
        "--log-level",
        default=os.getenv("UVICORN_LOG_LEVEL", "info"),
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (application logs follow LOG_LEVEL)",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()

    # create_app is a factory so --reload workers build a fresh app
    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )
