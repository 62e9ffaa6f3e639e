"""Exceptions raised by the bridge client and mapping of bridge error responses."""

import enum
import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import TypeAdapter, ValidationError

from .models import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Failure kinds, for callers that prefer switching over catching."""

    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_RESPONSE = "malformed_response"
    UNAUTHORIZED = "unauthorized"
    ENTITY_NOT_AVAILABLE = "entity_not_available"
    LINK_BUTTON_NOT_PRESSED = "link_button_not_pressed"
    DEVICE_OFF = "device_off"
    GROUP_TABLE_FULL = "group_table_full"
    API_FAILURE = "api_failure"
    ILLEGAL_STATE = "illegal_state"
    REQUIRES_AUTHENTICATION = "requires_authentication"
    INVALID_INPUT = "invalid_input"
    INVALID_GROUP_MUTATION = "invalid_group_mutation"


class HueError(Exception):
    """Base exception for all Hue-related errors."""

    kind: ErrorKind = ErrorKind.API_FAILURE


class HueConnectionError(HueError):
    """Network/connection related errors, including non-200 responses."""

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HueTimeoutError(HueConnectionError):
    """Request timeout errors."""

    pass


class HueApiError(HueError):
    """The bridge answered with an error object."""

    kind = ErrorKind.API_FAILURE

    def __init__(self, description: str, *, error_type: Optional[int] = None):
        super().__init__(description)
        self.description = description
        self.error_type = error_type


class HueMalformedResponseError(HueApiError):
    """The response body did not have the expected shape."""

    kind = ErrorKind.MALFORMED_RESPONSE


class HueUnauthorizedError(HueApiError):
    """The username is not (or no longer) whitelisted on the bridge."""

    kind = ErrorKind.UNAUTHORIZED


class HueEntityNotAvailableError(HueApiError):
    """The light, group or other resource does not exist."""

    kind = ErrorKind.ENTITY_NOT_AVAILABLE


class HueLinkButtonError(HueApiError):
    """The link button on the bridge was not pressed before linking."""

    kind = ErrorKind.LINK_BUTTON_NOT_PRESSED


class HueDeviceOffError(HueApiError):
    """The state change requires the device to be on."""

    kind = ErrorKind.DEVICE_OFF


class HueGroupTableFullError(HueApiError):
    """The bridge cannot store any more groups."""

    kind = ErrorKind.GROUP_TABLE_FULL


class HueStateError(HueError):
    """The session is in the wrong state for the requested operation."""

    kind = ErrorKind.ILLEGAL_STATE


class HueAuthenticationRequiredError(HueStateError):
    """The operation needs a linked username."""

    kind = ErrorKind.REQUIRES_AUTHENTICATION


class HueValidationError(HueError):
    """Parameter validation errors."""

    kind = ErrorKind.INVALID_INPUT


class HueInvalidGroupMutationError(HueValidationError):
    """The target group cannot be modified."""

    kind = ErrorKind.INVALID_GROUP_MUTATION


ERROR_TYPES: Dict[int, Type[HueApiError]] = {
    1: HueUnauthorizedError,
    3: HueEntityNotAvailableError,
    101: HueLinkButtonError,
    201: HueDeviceOffError,
    301: HueGroupTableFullError,
}

_error_list = TypeAdapter(List[ErrorResponse])


def parse_errors(body: Any) -> List[ErrorResponse]:
    """Strictly decode ``body`` as a list of error objects.

    Anything that is not error shaped (a resource object, a success
    envelope, invalid JSON) yields an empty list.
    """
    try:
        if isinstance(body, (str, bytes)):
            return _error_list.validate_json(body)
        return _error_list.validate_python(body)
    except ValidationError:
        return []


def interpret_response(status_code: int, body: Any) -> Optional[HueError]:
    """Map a raw response to the error it represents, or ``None`` on success."""
    if status_code != 200:
        return HueConnectionError(
            f"Bridge returned HTTP {status_code}", status_code=status_code
        )

    errors = parse_errors(body)
    if not errors:
        return None

    error = errors[0].error
    error_class = ERROR_TYPES.get(error.type, HueApiError)
    logger.debug(f"Bridge error {error.type} at {error.address}: {error.description}")
    return error_class(error.description, error_type=error.type)
