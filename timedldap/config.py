"""Configuration helpers for timedldap.

All settings come from the environment; see ``Settings.from_env``.
"""
from __future__ import annotations

from dataclasses import dataclass

from .utils.env import env_bool, env_choice, env_float, env_str

DEFAULT_URL = "ldap://localhost:389"


@dataclass(frozen=True, slots=True)
class Settings:
    url: str = DEFAULT_URL
    base: str = ""
    user: str | None = None
    password: str | None = None
    receive_timeout: float | None = None
    operate_phase: str = "search"
    read_only: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = env_float("TIMEDLDAP_RECEIVE_TIMEOUT", 0.0, minimum=0.0)
        return cls(
            url=env_str("TIMEDLDAP_URL", DEFAULT_URL),
            base=env_str("TIMEDLDAP_BASE", ""),
            user=env_str("TIMEDLDAP_USER") or None,
            password=env_str("TIMEDLDAP_PASSWORD") or None,
            receive_timeout=timeout or None,
            operate_phase=env_choice("TIMEDLDAP_OPERATE_PHASE", ("search", "operate"), "search"),
            read_only=env_bool("TIMEDLDAP_READ_ONLY", True),
        )


def load_settings() -> Settings:
    return Settings.from_env()
