"""
Development Server Entry Point
==============================

Usage:
    python run.py              # Development mode with reload
    python run.py --no-reload  # Development mode without reload
    python run.py --seed       # Create demo accounts before starting
"""

import argparse


def main():
    """Run the development server."""
    import uvicorn
    from civil_defence.core.config import settings

    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Run the Civil Defence portal API")
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Create demo accounts before starting",
    )
    args = parser.parse_args()

    if args.seed:
        from civil_defence.seed import seed_demo_users
        seed_demo_users()

    print(f"\n{'='*50}")
    print(f"  {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"  Environment: {settings.ENVIRONMENT}")
    print(f"{'='*50}\n")

    if args.no_reload:
        print("Running without auto-reload")
    else:
        print("Running with auto-reload enabled")

    print(f"Server: http://{args.host}:{args.port}")
    print("Press CTRL+C to stop\n")

    uvicorn.run(
        "civil_defence.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
