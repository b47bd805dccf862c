#!/usr/bin/env python3
"""
Startup script for the MenuPro API.

Usage:
    # Run with defaults (DATABASE_URL from the environment or .env)
    python run_server.py

    # Run against a specific database on a custom port
    python run_server.py --database-url sqlite:///./data/pizzaria.db --port 8001

    # Run with reload for development
    python run_server.py --reload
"""

import argparse
import os


def run_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
    database_url: str = None,
) -> None:
    """Run the application with uvicorn."""
    if database_url:
        os.environ["DATABASE_URL"] = database_url

    # Ensure data directory exists
    url = os.environ.get("DATABASE_URL", "")
    if url.startswith("sqlite:///./"):
        db_dir = os.path.dirname(url.replace("sqlite:///./", ""))
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    print(f"\n{'=' * 50}")
    print("Starting: MenuPro API")
    print(f"Port:     {port}")
    print(f"Database: {url or 'default (see menupro/config.py)'}")
    print(f"{'=' * 50}\n")

    import uvicorn

    uvicorn.run(
        "menupro.main:app",
        host=host,
        port=port,
        reload=reload,
    )


def main():
    parser = argparse.ArgumentParser(description="Run the MenuPro API")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=8000,
        help="Port to run on (default: 8000)",
    )
    parser.add_argument(
        "--database-url",
        "-d",
        help="SQLAlchemy database URL (overrides DATABASE_URL)",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()
    run_server(
        host=args.host,
        port=args.port,
        reload=args.reload,
        database_url=args.database_url,
    )


if __name__ == "__main__":
    main()
