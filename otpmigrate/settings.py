import os
from dataclasses import dataclass
from typing import Optional


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {value!r}")


@dataclass(frozen=True)
class Settings:
    default_url: Optional[str]
    json_indent: int
    otpauth_uris: bool
    host: str
    port: int
    basic_auth_user: Optional[str]
    basic_auth_password: Optional[str]

    @property
    def auth_enabled(self) -> bool:
        return bool(self.basic_auth_user and self.basic_auth_password)


def load_settings() -> Settings:
    basic_auth_user = _env("OTPMIGRATE_BASIC_AUTH_USER")
    basic_auth_password = _env("OTPMIGRATE_BASIC_AUTH_PASSWORD")
    if bool(basic_auth_user) != bool(basic_auth_password):
        raise ValueError("OTPMIGRATE_BASIC_AUTH_USER and OTPMIGRATE_BASIC_AUTH_PASSWORD must be set together")

    return Settings(
        default_url=_env("OTPMIGRATE_URL"),
        json_indent=_env_int("OTPMIGRATE_JSON_INDENT", 2),
        otpauth_uris=_env_bool("OTPMIGRATE_OTPAUTH_URIS", False),
        host=_env("OTPMIGRATE_HOST", "127.0.0.1") or "127.0.0.1",
        port=_env_int("OTPMIGRATE_PORT", 8000),
        basic_auth_user=basic_auth_user,
        basic_auth_password=basic_auth_password,
    )
