"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field

from kubefuzz.constants.enums import ALL_KINDS, ResourceKind
from kubefuzz.constants.limits import REFRESH_INTERVAL_MIN
from kubefuzz.constants.timeouts import VIEW_REFRESH_INTERVAL


class NavigatorSettings(BaseModel):
    """Invocation settings, resolved by the CLI and handed to the app."""

    model_config = ConfigDict(populate_by_name=True)

    # Cluster scoping
    context: str | None = None
    namespace: str | None = None
    kubeconfig: str | None = None
    all_contexts: bool = False
    kinds: list[ResourceKind] = Field(default_factory=lambda: list(ALL_KINDS))

    # Safety
    read_only: bool = False

    # UI preferences
    refresh_interval: float = Field(
        default=VIEW_REFRESH_INTERVAL, ge=REFRESH_INTERVAL_MIN
    )  # seconds

    # Logging
    log_file: str | None = None
    debug: bool = False

    @property
    def kind_label(self) -> str:
        """Header label: the single kind alias, or ``all``."""
        if len(self.kinds) == 1:
            return self.kinds[0].alias
        return "all"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when persisted state fails to load."""


class ConfigSaveError(ConfigError):
    """Raised when persisted state fails to save."""
