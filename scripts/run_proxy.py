#!/usr/bin/env python3
"""
Run the M3 x Treolan proxy with uvicorn.

Credentials come from the environment (or .env):
  TREOLAN_LOGIN / TREOLAN_PASSWORD, or TREOLAN_TOKEN for a static token.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from treolan_proxy.api.main import LOG_FORMAT, create_app
from treolan_proxy.utils.config_loader import load_proxy_config


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def main() -> int:
    parser = argparse.ArgumentParser(description="M3 Mobile x Treolan catalog proxy")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: $PORT or 3000)")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/proxy.yml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    config = load_proxy_config(args.config)
    setup_logging("DEBUG" if args.verbose else config.server.log_level)

    port = args.port or config.server.port
    logging.getLogger(__name__).info("Starting proxy on %s:%d", args.host, port)
    uvicorn.run(create_app(config), host=args.host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
