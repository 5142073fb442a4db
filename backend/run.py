"""
Development Server Entry Point
==============================

Usage:
    python run.py              # Development mode with reload
    python run.py --no-reload  # Development mode without reload
    python run.py --create-manager ada@example.com --name "Ada"
                               # Seed a manager account, print its token
"""

import argparse


def create_manager(email: str, name: str) -> None:
    """Create a manager account and print a development token for it."""
    from app.db.session import SessionLocal
    from app.models.role_enum import Role
    from app.services.token_service import create_access_token
    from app.services.user_service import UserService

    db = SessionLocal()
    try:
        user = UserService(db).create_user(name=name, email=email, role=Role.MANAGER)
    finally:
        db.close()

    print(f"Manager created: {user.id}")
    print(f"Access token: {create_access_token(user.id)}")


def main():
    """Run the development server."""
    import uvicorn
    from app.core.config import settings

    parser = argparse.ArgumentParser(description="Run the Defect Tracker development server")
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
        "--create-manager",
        metavar="EMAIL",
        help="Create a manager account and exit",
    )
    parser.add_argument(
        "--name",
        default="Manager",
        help="Display name for --create-manager",
    )
    args = parser.parse_args()

    if args.create_manager:
        create_manager(args.create_manager, args.name)
        return

    print(f"\n{'='*50}")
    print(f"  {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"  Environment: {settings.ENVIRONMENT}")
    print(f"{'='*50}\n")

    print(f"Server: http://{args.host}:{args.port}")
    print("Press CTRL+C to stop\n")

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
