from __future__ import annotations

import contextlib
import time
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from gateway.server.middleware import RequestLoggingMiddleware, SlashNormalizationMiddleware
from gateway.server.resolver import AddressResolver, resolve_ipv4
from gateway.server.settings import GatewayServerSettings
from gateway.views import get_form, get_game_accounts, get_portal, post_login, post_refresh_ticket
from shared.auth.bruteforce import BruteforceGuard
from shared.auth.service import LoginService
from shared.auth.settings import AuthSettings
from shared.auth.tickets import TicketManager
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.db import AsyncQueryExecutor, Database
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from starlette.requests import Request

    from gateway.server.resolver import NameResolver


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def create_app(
    settings: GatewayServerSettings | None = None,
    auth_settings: AuthSettings | None = None,
    *,
    resolve: NameResolver = resolve_ipv4,
    clock: Callable[[], float] = time.time,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = GatewayServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()

    routes = [
        Route("/login-form", get_form, methods=["GET"], name="login_form"),
        Route("/game-accounts", get_game_accounts, methods=["GET"], name="game_accounts"),
        Route("/portal", get_portal, methods=["GET"], name="portal"),
        Route("/login", post_login, methods=["POST"], name="login"),
        Route("/refresh-ticket", post_refresh_ticket, methods=["POST"], name="refresh_ticket"),
        Route("/health", health, methods=["GET"], name="health"),
    ]

    db = Database(auth_settings.database_path)
    db.connect()
    executor = AsyncQueryExecutor(db)
    login_service = LoginService(
        executor,
        TicketManager(auth_settings.ticket_duration, clock=clock),
        BruteforceGuard(auth_settings, clock=clock),
        clock=clock,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None]:
        try:
            # Resolution failure propagates and aborts startup.
            app.state.resolver = await AddressResolver.create(
                settings.external_address,
                settings.local_address,
                settings.portal_port,
                local_prefix_length=settings.local_prefix_length,
                resolve=resolve,
            )
            logger.info("login gateway ready")
            yield
        finally:
            db.close()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(RequestLoggingMiddleware)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.login_service = login_service
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory gateway.server.app:get_app."""
    s = GatewayServerSettings()
    auth = AuthSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
