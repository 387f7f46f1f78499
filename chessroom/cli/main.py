from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from chessroom.config import load_settings


def main(argv: Optional[List[str]] = None) -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Serve the chess room engine over HTTP")
    parser.add_argument(
        "--host", default=settings.host, help=f"bind host (default: {settings.host})"
    )
    parser.add_argument(
        "--port", type=int, default=settings.port, help=f"bind port (default: {settings.port})"
    )
    parser.add_argument("--reload", action="store_true", help="reload on code changes")
    args = parser.parse_args(argv)

    uvicorn.run(
        "chessroom.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
