#!/usr/bin/env python3
"""
Storefront Backend Runner
=========================

Usage:
    python run_app.py                    # Development mode with auto-reload (default)
    python run_app.py --mode prod        # Production mode with workers
    python run_app.py --init-db          # Create tables, then exit
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import asyncio
import sys

def print_banner():
    """Print application banner"""
    banner = """
+-------------------------------------------------------+
|                  Storefront Backend                   |
+-------------------------------------------------------+
    """
    print(banner)

def init_database():
    """Create all tables in the configured database"""
    from storefront.core.database import init_db, close_db

    async def _run():
        try:
            await init_db()
        finally:
            await close_db()

    asyncio.run(_run())
    print("Database tables created")

def run_server(mode: str, host: str, port: int, workers: int):
    """Run uvicorn in the requested mode"""
    import uvicorn

    if mode == "dev":
        print(f"Development server on http://{host}:{port} (auto-reload)")
        uvicorn.run("storefront.main:app", host=host, port=port, reload=True, log_level="debug")
    else:
        print(f"Production server on http://{host}:{port} with {workers} workers")
        uvicorn.run("storefront.main:app", host=host, port=port, workers=workers, log_level="info")

def main():
    parser = argparse.ArgumentParser(description="Storefront Backend Runner")
    parser.add_argument("--mode", choices=["dev", "prod"], default="dev", help="Server mode")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--workers", type=int, default=4, help="Worker processes in prod mode")
    parser.add_argument("--init-db", action="store_true", help="Create database tables and exit")
    args = parser.parse_args()

    print_banner()

    if args.init_db:
        init_database()
        return 0

    try:
        run_server(args.mode, args.host, args.port, args.workers)
    except KeyboardInterrupt:
        print("\nServer stopped")
    return 0

if __name__ == "__main__":
    sys.exit(main())
