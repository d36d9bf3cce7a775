"""JSON wire messages exchanged with game clients."""

from enum import StrEnum

from pydantic import BaseModel, Field

from shared.auth.models import GameAccountView


class FormType(StrEnum):
    LOGIN_FORM = "LOGIN_FORM"


class AuthenticationState(StrEnum):
    LOGIN = "LOGIN"
    LEGAL = "LEGAL"
    AUTHENTICATOR = "AUTHENTICATOR"
    DONE = "DONE"


class FormInput(BaseModel, frozen=True):
    input_id: str
    type: str
    label: str
    max_length: int | None = None


class FormInputs(BaseModel, frozen=True):
    type: FormType
    inputs: list[FormInput]


class FormInputValue(BaseModel, frozen=True):
    input_id: str
    value: str


class LoginForm(BaseModel, frozen=True):
    """Body of POST /login."""

    platform_id: str = ""
    program_id: str = ""
    version: str = ""
    inputs: list[FormInputValue] = Field(default_factory=list)

    def value_of(self, input_id: str) -> str:
        """Value of the last input with this id, "" when missing."""
        value = ""
        for item in self.inputs:
            if item.input_id == input_id:
                value = item.value
        return value


class LoginResult(BaseModel, frozen=True):
    authentication_state: AuthenticationState
    error_code: str | None = None
    error_message: str | None = None
    url: str | None = None
    login_ticket: str | None = None


class GameAccountList(BaseModel, frozen=True):
    game_accounts: list[GameAccountView] = Field(default_factory=list)


class LoginRefreshResult(BaseModel, frozen=True):
    login_ticket_expiry: int | None = None  # whole seconds
    is_expired: bool | None = None


ACCOUNT_NAME_INPUT = "account_name"
PASSWORD_INPUT = "password"  # noqa: S105 - form field id, not a secret
SUBMIT_INPUT = "log_in_submit"

LOGIN_FORM = FormInputs(
    type=FormType.LOGIN_FORM,
    inputs=[
        FormInput(input_id=ACCOUNT_NAME_INPUT, type="text", label="E-mail", max_length=320),
        FormInput(input_id=PASSWORD_INPUT, type="password", label="Password", max_length=16),
        FormInput(input_id=SUBMIT_INPUT, type="submit", label="Log In"),
    ],
)

UNABLE_TO_DECODE = LoginResult(
    authentication_state=AuthenticationState.LOGIN,
    error_code="UNABLE_TO_DECODE",
    error_message="There was an internal error while connecting to the login service. Please try again later.",
)
