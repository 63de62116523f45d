# ilp_runner/core/domain/models.py
from enum import Enum
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, SecretStr

MASK = "***"

# --- Enums ---

class Component(str, Enum):
    """Identity of every child process the runner launches, in issue order."""
    STORE = "store"
    SETTLEMENT_ENGINE = "settlement-engine"
    BOOTSTRAP = "bootstrap"
    NODE = "node"

class RunState(str, Enum):
    """Per-run state machine. There is no way back to VALIDATING and no STOPPED state."""
    VALIDATING = "validating"
    LAUNCHING_STORE = "launching.store"
    LAUNCHING_SETTLEMENT_ENGINE = "launching.settlement-engine"
    LAUNCHING_BOOTSTRAP = "launching.bootstrap"
    LAUNCHING_NODE = "launching.node"
    RUNNING = "running"

    @classmethod
    def launching(cls, component: Component) -> "RunState":
        return cls(f"launching.{component.value}")

class StdioPolicy(str, Enum):
    INHERIT = "inherit"
    DEVNULL = "devnull"

# --- Value Objects ---

class ResolvedConfig(BaseModel):
    """
    Validated, immutable runner configuration.

    Produced exactly once by the config validator and handed to every launcher.
    Secrets are SecretStr so they never show up in repr() or logs.
    """
    model_config = ConfigDict(frozen=True)

    xrp_address: str
    xrp_secret: SecretStr
    admin_token: SecretStr
    ilp_address: str = "private.local.node"
    redis_dir: str = "."
    redis_unix_socket: str = "/tmp/redis.sock"

    # Verbosity variables forwarded verbatim to children
    rust_log: Optional[str] = None
    debug: Optional[str] = None

    # External executables
    redis_server_bin: str = "redis-server"
    settlement_engine_bin: str = "xrp-settlement-engine"
    interledger_bin: str = "interledger"

    # Admin account asset metadata
    asset_code: str = "XRP"
    asset_scale: int = 9

    @property
    def redis_uri(self) -> str:
        return f"unix:{self.redis_unix_socket}"

    def secrets(self) -> Tuple[str, ...]:
        """Raw secret values, used for masking launch arguments."""
        return (self.xrp_secret.get_secret_value(), self.admin_token.get_secret_value())

    def redacted(self) -> Dict[str, object]:
        """A log-safe view of the configuration."""
        data = self.model_dump()
        data["xrp_secret"] = MASK
        data["admin_token"] = MASK
        return data

class LaunchSpec(BaseModel):
    """
    Everything needed to start one child process.
    Built right before the spawn and discarded afterwards.
    """
    model_config = ConfigDict(frozen=True)

    component: Component
    executable: str
    args: Tuple[str, ...] = ()

    # None means "inherit the orchestrator's full environment"
    env: Optional[Dict[str, str]] = None
    stdio: StdioPolicy = StdioPolicy.INHERIT

    # Values that must be masked whenever the LaunchSpec is rendered
    sensitive: Tuple[str, ...] = Field(default=(), repr=False)

    def display_args(self) -> List[str]:
        """Arguments with every sensitive value replaced by a mask."""
        shown = []
        for arg in self.args:
            for value in self.sensitive:
                if value:
                    arg = arg.replace(value, MASK)
            shown.append(arg)
        return shown

    def command_line(self) -> str:
        return " ".join([self.executable, *self.display_args()])

class StageResult(BaseModel):
    """Outcome of issuing a single launch stage."""
    component: Component
    issued: bool
    pid: Optional[int] = None
    error: Optional[str] = None
    ready: Optional[bool] = None  # None when no readiness probe ran
