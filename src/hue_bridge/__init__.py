"""Client library for the Philips Hue bridge REST API."""

from .bridge import HueBridge
from .config import BridgeConfig
from .errors import (
    ErrorKind,
    HueApiError,
    HueAuthenticationRequiredError,
    HueConnectionError,
    HueDeviceOffError,
    HueEntityNotAvailableError,
    HueError,
    HueGroupTableFullError,
    HueInvalidGroupMutationError,
    HueLinkButtonError,
    HueMalformedResponseError,
    HueStateError,
    HueTimeoutError,
    HueUnauthorizedError,
    HueValidationError,
)
from .hue_client import HttpResult, HueHttpClient
from .models import (
    AuthenticatedConfig,
    Config,
    ConfigUpdate,
    FullConfig,
    FullGroup,
    FullLight,
    Group,
    Light,
    LightState,
    StateUpdate,
    User,
)

__version__ = "1.0.0"
__description__ = "Client library for the Philips Hue bridge REST API"

__all__ = [
    "HueBridge",
    "BridgeConfig",
    "HueHttpClient",
    "HttpResult",
    "Light",
    "FullLight",
    "LightState",
    "Group",
    "FullGroup",
    "Config",
    "AuthenticatedConfig",
    "FullConfig",
    "User",
    "StateUpdate",
    "ConfigUpdate",
    "ErrorKind",
    "HueError",
    "HueConnectionError",
    "HueTimeoutError",
    "HueApiError",
    "HueMalformedResponseError",
    "HueUnauthorizedError",
    "HueEntityNotAvailableError",
    "HueLinkButtonError",
    "HueDeviceOffError",
    "HueGroupTableFullError",
    "HueStateError",
    "HueAuthenticationRequiredError",
    "HueValidationError",
    "HueInvalidGroupMutationError",
]
