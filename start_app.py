# start_app.py
"""Load environment overrides and launch the API server."""

from __future__ import annotations

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load settings, then start the API.

    Orders are held in memory only; stopping the server discards them.
    """

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="0.0.0.0")  # nosec B104: bind for local development
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file

    settings = config.get_settings()  # ensure settings are initialized with any override

    try:
        uvicorn.run(
            "orderdesk.app.main:app",
            host=args.host,
            port=args.port,
            log_level=settings.log_level.lower(),
            reload=args.reload,
        )
    except ModuleNotFoundError as exc:
        missing = exc.name or str(exc)
        print(
            f"Missing dependency: {missing}. Install it with 'pip install {missing}'",
            file=sys.stderr,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()
