"""
Client configuration read from the environment (.env supported).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.dhan.co/v2"
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class Settings:
    """
    Read-only after construction; shared by every service of a client.

    ``timeout_s`` is a constructor argument only; the environment does not set it.
    """

    access_token: str
    base_url: str = DEFAULT_API_URL
    client_id: Optional[str] = None
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv()

        access_token = os.getenv("DHAN_ACCESS_TOKEN")
        if not access_token:
            raise ConfigurationError("DHAN_ACCESS_TOKEN is not configured. Set it in the environment or a .env file.")

        return cls(
            access_token=access_token,
            base_url=(os.getenv("DHAN_API_URL") or DEFAULT_API_URL).rstrip("/"),
            client_id=os.getenv("DHAN_CLIENT_ID") or None,
        )
