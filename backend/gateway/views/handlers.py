"""Login gateway endpoints: form, login, ticket refresh, game accounts, portal."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from pydantic import ValidationError
from starlette.responses import JSONResponse, PlainTextResponse, Response

from gateway.views.messages import (
    ACCOUNT_NAME_INPUT,
    LOGIN_FORM,
    PASSWORD_INPUT,
    UNABLE_TO_DECODE,
    AuthenticationState,
    GameAccountList,
    LoginForm,
    LoginRefreshResult,
    LoginResult,
)
from shared.auth.authorization import extract_ticket

if TYPE_CHECKING:
    from pydantic import BaseModel
    from starlette.requests import Request

    from gateway.server.resolver import AddressResolver
    from gateway.server.settings import GatewayServerSettings
    from shared.auth.service import LoginService

JSON_MEDIA_TYPE = "application/json;charset=utf-8"


def _message_response(message: BaseModel, status_code: int = HTTPStatus.OK) -> Response:
    """Serialize a wire message, leaving out fields that are not set."""
    return Response(message.model_dump_json(exclude_none=True), status_code=status_code, media_type=JSON_MEDIA_TYPE)


def _unauthorized() -> Response:
    return JSONResponse({"error": "Authentication required"}, status_code=HTTPStatus.UNAUTHORIZED)


def _client_address(request: Request) -> str:
    return request.client.host if request.client is not None else ""


async def get_form(_request: Request) -> Response:
    """GET /login-form - describe the fields the client must submit."""
    return _message_response(LOGIN_FORM)


async def get_game_accounts(request: Request) -> Response:
    """GET /game-accounts - list game accounts for the ticket in the Authorization header."""
    ticket = extract_ticket(request.headers.get("authorization"))
    if not ticket:
        return _unauthorized()

    login_service: LoginService = request.app.state.login_service
    game_accounts = await login_service.list_game_accounts(ticket)
    return _message_response(GameAccountList(game_accounts=game_accounts))


async def get_portal(request: Request) -> Response:
    """GET /portal - "<hostname>:<port>" of the portal this client should connect to."""
    resolver: AddressResolver = request.app.state.resolver
    settings: GatewayServerSettings = request.app.state.settings
    hostname = resolver.hostname_for(_client_address(request))
    return PlainTextResponse(f"{hostname}:{settings.portal_port}")


async def post_login(request: Request) -> Response:
    """POST /login - exchange credentials for a login ticket.

    Unknown accounts and wrong passwords get the same "DONE without ticket"
    answer so the response never reveals which accounts exist.
    """
    try:
        form = LoginForm.model_validate_json(await request.body())
    except ValidationError:
        return _message_response(UNABLE_TO_DECODE, status_code=HTTPStatus.BAD_REQUEST)

    login_service: LoginService = request.app.state.login_service
    ticket = await login_service.login(
        form.value_of(ACCOUNT_NAME_INPUT),
        form.value_of(PASSWORD_INPUT),
        _client_address(request),
    )
    return _message_response(LoginResult(authentication_state=AuthenticationState.DONE, login_ticket=ticket))


async def post_refresh_ticket(request: Request) -> Response:
    """POST /refresh-ticket - extend the ticket in the Authorization header."""
    ticket = extract_ticket(request.headers.get("authorization"))
    if not ticket:
        return _unauthorized()

    login_service: LoginService = request.app.state.login_service
    new_expiry = await login_service.refresh_ticket(ticket)
    if new_expiry is None:
        return _message_response(LoginRefreshResult(is_expired=True))
    return _message_response(LoginRefreshResult(login_ticket_expiry=int(new_expiry)))
