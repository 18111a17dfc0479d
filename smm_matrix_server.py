"""smm_matrix_server
====================
Mini-README: Entry point for running SMM Matrix. Creates the FastAPI application,
mounts routers, installs the role-gate exception handler, exposes CLI utilities for
database initialisation, reset, and role promotion, and starts an ASGI server with
configurable host/port/log level settings.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
import uvicorn

from smm_matrix import get_logger, get_settings
from smm_matrix.database import AsyncSessionMaker, drop_db, init_db
from smm_matrix.models import UserRole
from smm_matrix.routers import admin as admin_router
from smm_matrix.routers import auth as auth_router
from smm_matrix.routers import checkout as checkout_router
from smm_matrix.routers import performance as performance_router
from smm_matrix.routers import public as public_router
from smm_matrix.routers import staff as staff_router
from smm_matrix.security import AccessDenied
from smm_matrix.services import assign_role_by_email, seed_demo_data

LOGGER = get_logger(__name__)


async def handle_access_denied(request: Request, exc: AccessDenied):
    """Send browsers to the login page and everything else a 403."""

    if exc.wants_html:
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    return PlainTextResponse("Forbidden", status_code=status.HTTP_403_FORBIDDEN)


def create_app() -> FastAPI:
    """Construct and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title=settings.app_name)

    app.add_exception_handler(AccessDenied, handle_access_denied)

    app.include_router(public_router.router)
    app.include_router(auth_router.router)
    app.include_router(checkout_router.router)
    app.include_router(admin_router.router)
    app.include_router(staff_router.router)
    app.include_router(performance_router.router)

    @app.on_event("startup")
    async def ensure_database_schema() -> None:
        """Create tables and seed demo data on boot."""

        await initialise_database()

    @app.get("/healthz")
    async def healthcheck() -> dict[str, Any]:
        return {"status": "ok"}

    return app


app = create_app()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; ``argv`` defaults to ``sys.argv[1:]``."""

    settings = get_settings()
    parser = argparse.ArgumentParser(description=f"{settings.app_name} server and maintenance commands")
    parser.add_argument("--host", default=settings.default_host, help="Interface to listen on")
    parser.add_argument("--port", type=int, default=settings.default_port, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--log-level", default=settings.log_level.lower(), help="Uvicorn log level")
    parser.add_argument("--init-db", action="store_true", help="Initialise the database and exit")
    parser.add_argument("--reset-db", action="store_true", help="Drop every table and exit")
    parser.add_argument(
        "--promote-user",
        metavar="EMAIL",
        help="Assign a role to the specified user (by email) and exit",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        help="Role to assign when using --promote-user",
    )

    args = parser.parse_args(argv)
    if args.promote_user and not args.role:
        parser.error("--promote-user requires --role to be supplied")

    return args


async def promote_user(email: str, role: UserRole) -> None:
    """Change a user's role from the command line."""

    async with AsyncSessionMaker() as session:
        if not await assign_role_by_email(session, email, role):
            LOGGER.error("Cannot assign %s: no account for %s", role.value, email)
            raise SystemExit(1)


async def initialise_database() -> None:
    """Create tables and seed demo data when enabled."""

    LOGGER.info("Initialising database...")
    await init_db()
    if get_settings().seed_demo_data:
        async with AsyncSessionMaker() as session:
            await seed_demo_data(session)
    LOGGER.info("Database initialisation complete")


async def run_maintenance(args: argparse.Namespace) -> bool:
    """Run the requested database commands in order; returns whether any ran."""

    ran = False
    if args.reset_db:
        await drop_db()
        ran = True
    if args.init_db:
        await initialise_database()
        ran = True
    if args.promote_user:
        await promote_user(args.promote_user, UserRole(args.role))
        ran = True
    return ran


def main(argv: Sequence[str] | None = None) -> None:
    """Run maintenance commands, or serve the app when none were given."""

    args = parse_args(argv)
    if asyncio.run(run_maintenance(args)):
        return

    uvicorn.run(
        "smm_matrix_server:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
