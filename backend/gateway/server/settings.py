"""Gateway server configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class GatewayServerSettings(BaseSettings):
    model_config = {"env_prefix": "GATEWAY_"}

    log_dir: str = "backend/logs/gateway"

    # Hostname advertised to remote clients by GET /portal
    external_address: str = "127.0.0.1"
    # Hostname advertised to clients on the local network or loopback
    local_address: str = "127.0.0.1"
    # Prefix length defining "same network" around each resolved address
    local_prefix_length: int = Field(default=24, ge=0, le=32)

    portal_port: int = Field(default=1119, gt=0, le=65535)
