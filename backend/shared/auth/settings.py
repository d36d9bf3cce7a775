"""Auth settings for the login service."""

from pydantic import Field
from pydantic_settings import BaseSettings

from shared.auth.models import BanMode


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # SQLite database file path
    database_path: str = "backend/login.db"

    # Seconds a login ticket stays valid after login or refresh
    ticket_duration: int = Field(default=3600, gt=0)

    # Failed logins before an automatic ban; 0 disables the bruteforce guard
    wrong_pass_max_count: int = Field(default=0, ge=0)

    # Log every wrong password attempt (address, login, account id)
    wrong_pass_logging: bool = False

    wrong_pass_ban_mode: BanMode = BanMode.IP

    # Automatic ban length in seconds
    wrong_pass_ban_time: int = Field(default=600, ge=0)
