"""Configuration for a bridge connection."""

import ipaddress
import logging
import os
import re
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .hue_client import DEFAULT_TIMEOUT_MS

_HOSTNAME = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*(:\d{1,5})?$")


class BridgeConfig(BaseModel):
    """Configuration for Hue bridge connection."""

    bridge_ip: str = Field(description="IP address or host name of the Hue bridge")
    username: Optional[str] = Field(
        default=None, description="Whitelisted username, if already linked"
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Connect and read timeout in milliseconds, 0 for none",
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("bridge_ip")
    @classmethod
    def validate_ip(cls, v):
        """Validate IP address or host name format."""
        try:
            ipaddress.ip_address(v)
            return v
        except ValueError:
            pass
        if not _HOSTNAME.match(v):
            raise ValueError(f"Invalid bridge address: {v}")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        """Validate username format."""
        if v is not None and not 10 <= len(v) <= 40:
            raise ValueError("Username must be between 10 and 40 characters long")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Create configuration from environment variables and a .env file."""
        load_dotenv()
        return cls(
            bridge_ip=os.getenv("HUE_BRIDGE_IP", ""),
            username=os.getenv("HUE_USERNAME") or None,
            timeout_ms=int(os.getenv("HUE_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the root logger."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
