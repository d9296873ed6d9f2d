"""
Lead Scoring Engine - Main Entry Point
======================================
Run this file to start the FastAPI server.

Usage:
    python main.py                    # Start server on port 8000
    python main.py --port 8080        # Start server on custom port
    python main.py --reload           # Start with auto-reload (dev mode)

API Documentation:
    http://localhost:8000/docs        # Swagger UI
    http://localhost:8000/redoc       # ReDoc
"""

import argparse
import uvicorn

from lead_scoring.config.settings import API_CONFIG, configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Lead Scoring Engine API Server")
    parser.add_argument(
        "--host",
        type=str,
        default=API_CONFIG["host"],
        help="Host to bind the server to (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=API_CONFIG["port"],
        help="Port to run the server on (default: %(default)s)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=API_CONFIG["log_level"],
        help="Logging level (default: %(default)s)",
    )

    args = parser.parse_args(argv)

    # Each worker would hold its own in-memory ICP configuration
    if args.workers > 1 and not args.reload and not API_CONFIG["icp_config_path"]:
        parser.error("--workers > 1 requires ICP_CONFIG_PATH so workers share the ICP configuration")

    configure_logging(args.log_level)

    icp_storage = API_CONFIG["icp_config_path"] or "in memory"
    print(f"""
    ╔══════════════════════════════════════════════════════════════╗
    ║                   LEAD SCORING ENGINE                        ║
    ╠══════════════════════════════════════════════════════════════╣
    ║  Server:  http://{args.host}:{args.port}
    ║  Docs:    http://localhost:{args.port}/docs
    ║  Health:  http://localhost:{args.port}/api/health
    ║  ICP:     {icp_storage}
    ╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "lead_scoring.api.endpoints:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
