# ilp_runner/shared/config.py
from enum import Enum
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ilp_runner.core.domain.exceptions import ConfigurationError
from ilp_runner.core.domain.models import ResolvedConfig

class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"

# Mandatory values, in the order they are reported when missing
REQUIRED_SETTINGS = ("XRP_ADDRESS", "XRP_SECRET", "ADMIN_TOKEN")

class Settings(BaseSettings):
    """
    Raw environment snapshot.

    Everything is optional at this level so that *all* missing mandatory
    values can be reported at once by `validate_environment`.
    """

    # --- Ledger credentials (mandatory) ---
    XRP_ADDRESS: Optional[str] = None
    XRP_SECRET: Optional[SecretStr] = None
    ADMIN_TOKEN: Optional[SecretStr] = None

    # --- Node ---
    ILP_ADDRESS: Optional[str] = None
    ASSET_CODE: str = "XRP"
    ASSET_SCALE: int = 9

    # --- Store (Redis) ---
    REDIS_DIR: Optional[str] = None
    REDIS_UNIX_SOCKET: str = "/tmp/redis.sock"

    # --- External executables ---
    REDIS_SERVER_BIN: str = "redis-server"
    SETTLEMENT_ENGINE_BIN: str = "xrp-settlement-engine"
    INTERLEDGER_BIN: str = "interledger"

    # --- Child verbosity (forwarded verbatim) ---
    RUST_LOG: Optional[str] = None
    DEBUG: Optional[str] = None

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.CONSOLE
    OTEL_SERVICE_NAME: str = "ilp-node-runner"

    # --- Readiness gating (off = fire-and-forget) ---
    READINESS_GATING: bool = False
    READINESS_TIMEOUT_SEC: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

def _present(value) -> Optional[str]:
    """Returns the plain string value, or None if unset/blank."""
    if value is None:
        return None
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return value if value.strip() else None

def validate_environment(settings: Optional[Settings] = None) -> ResolvedConfig:
    """
    The config validator. Fails fast, before anything is spawned.

    Raises:
        ConfigurationError: Listing every mandatory variable that is absent or empty.
    """
    settings = settings if settings is not None else Settings()

    values = {name: _present(getattr(settings, name)) for name in REQUIRED_SETTINGS}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise ConfigurationError(missing)

    return ResolvedConfig(
        xrp_address=values["XRP_ADDRESS"],
        xrp_secret=SecretStr(values["XRP_SECRET"]),
        admin_token=SecretStr(values["ADMIN_TOKEN"]),
        ilp_address=_present(settings.ILP_ADDRESS) or "private.local.node",
        redis_dir=_present(settings.REDIS_DIR) or ".",
        redis_unix_socket=settings.REDIS_UNIX_SOCKET,
        rust_log=settings.RUST_LOG,
        debug=settings.DEBUG,
        redis_server_bin=settings.REDIS_SERVER_BIN,
        settlement_engine_bin=settings.SETTLEMENT_ENGINE_BIN,
        interledger_bin=settings.INTERLEDGER_BIN,
        asset_code=settings.ASSET_CODE,
        asset_scale=settings.ASSET_SCALE,
    )
