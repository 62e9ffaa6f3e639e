"""Session with a single Hue bridge."""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .config import BridgeConfig
from .errors import (
    HueAuthenticationRequiredError,
    HueInvalidGroupMutationError,
    HueMalformedResponseError,
    HueStateError,
    HueUnauthorizedError,
    HueValidationError,
    interpret_response,
)
from .hue_client import DEFAULT_TIMEOUT_MS, HttpResult, HueHttpClient
from .models import (
    ALL_LIGHTS_GROUP_ID,
    DATE_FORMAT,
    AuthenticatedConfig,
    Config,
    ConfigUpdate,
    CreateUserRequest,
    FullConfig,
    FullGroup,
    FullLight,
    Group,
    Light,
    LightRef,
    NewLightsResponse,
    SetAttributesRequest,
    StateUpdate,
    SuccessResponse,
)
from .urls import build_url, encode_segment, resource_path

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

GroupRef = Union[Group, str]

_GROUP_PATH = re.compile(r"^/groups/([0-9]+)$")

_light_map = TypeAdapter(Dict[str, Light])
_group_map = TypeAdapter(Dict[str, Group])
_success_list = TypeAdapter(List[SuccessResponse])


def _light_id(light: LightRef) -> str:
    light_id = light.id if isinstance(light, Light) else light
    if light_id is None:
        raise HueValidationError("Light has no id")
    return light_id


def _created_group_id(success: Dict[str, Any]) -> Optional[str]:
    # The new group's location is reported as a value ({"id": "/groups/7"})
    # or as the key of the success mapping.
    for candidate in [*success.values(), *success.keys()]:
        if isinstance(candidate, str):
            match = _GROUP_PATH.match(candidate)
            if match:
                return match.group(1)
    return None


class HueBridge:
    """Connection with a Hue bridge, either anonymous or as a linked user.

    The session is authenticated exactly when ``username`` is set. Linking
    sets it, unlinking clears it, and so does any response telling us the
    user is no longer whitelisted.
    """

    def __init__(
        self,
        address: str,
        username: Optional[str] = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        http: Optional[HueHttpClient] = None,
    ):
        self._address = address
        self._username = username
        self._http = http if http is not None else HueHttpClient(timeout_ms=timeout_ms)

    @classmethod
    def from_config(
        cls, config: BridgeConfig, http: Optional[HueHttpClient] = None
    ) -> "HueBridge":
        return cls(
            config.bridge_ip,
            config.username,
            timeout_ms=config.timeout_ms,
            http=http,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def address(self) -> str:
        return self._address

    @property
    def username(self) -> Optional[str]:
        """Username currently authenticated with, or None."""
        return self._username

    @property
    def is_authenticated(self) -> bool:
        return self._username is not None

    def set_timeout(self, timeout_ms: int) -> None:
        """Set the connect and read timeout in milliseconds, 0 for none."""
        self._http.set_timeout(timeout_ms)

    def url(self, path: str) -> str:
        return build_url(self._address, self._username, path)

    # Lights

    def list_lights(self) -> List[Light]:
        """Return the lights known to the bridge."""
        self._require_authentication()

        result = self._http.get(self.url("lights"))
        self._handle_errors(result)

        return self._with_ids(self._parse_json(result.body, _light_map))

    def last_search_time(self) -> Optional[datetime]:
        """Return when a search for new lights was last started.

        The current time is returned while a search is running, and None
        if no search was ever started or the bridge reports something
        that is not a date.
        """
        self._require_authentication()

        result = self._http.get(self.url("lights/new"))
        self._handle_errors(result)

        last_scan = self._parse(result.body, NewLightsResponse).lastscan
        if last_scan == "none":
            return None
        if last_scan == "active":
            return datetime.now()
        try:
            return datetime.strptime(last_scan, DATE_FORMAT)
        except ValueError:
            logger.debug(f"Ignoring unparseable lastscan value {last_scan!r}")
            return None

    def start_search(self) -> None:
        """Start searching for new lights.

        The bridge searches for one minute and adds at most 15 new lights.
        """
        self._require_authentication()

        result = self._http.post(self.url("lights"), "")
        self._handle_errors(result)

    def get_light(self, light: LightRef) -> FullLight:
        self._require_authentication()

        light_id = _light_id(light)
        result = self._http.get(self.url(resource_path("lights", light_id)))
        self._handle_errors(result)

        full_light = self._parse(result.body, FullLight)
        full_light.id = light_id
        return full_light

    def set_light_name(self, light: LightRef, name: str) -> str:
        """Rename a light and return the name the bridge settled on.

        The bridge appends a number to duplicate names.
        """
        self._require_authentication()

        light_id = _light_id(light)
        body = self._payload(SetAttributesRequest, name=name)
        result = self._http.put(self.url(resource_path("lights", light_id)), body)
        self._handle_errors(result)

        return self._success_value(result, f"/lights/{encode_segment(light_id)}/name")

    def set_light_state(self, light: LightRef, update: StateUpdate) -> None:
        self._require_authentication()

        path = resource_path("lights", _light_id(light)) + "/state"
        result = self._http.put(self.url(path), update.to_json())
        self._handle_errors(result)

    # Groups

    def list_groups(self) -> List[Group]:
        """Return all groups, starting with the implicit all-lights group."""
        self._require_authentication()

        result = self._http.get(self.url("groups"))
        self._handle_errors(result)

        groups = self._with_ids(self._parse_json(result.body, _group_map))
        return [Group.all_lights(), *groups]

    def create_group(
        self, lights: Sequence[LightRef], name: Optional[str] = None
    ) -> Group:
        """Create a group and return it.

        The returned group carries the requested name (or "Group"). The
        bridge may append a number to duplicate names, so fetch the group
        with get_group to learn its final name.
        """
        self._require_authentication()

        body = self._payload(SetAttributesRequest, name=name, lights=lights)
        result = self._http.post(self.url("groups"), body)
        self._handle_errors(result)

        success = self._first_success(result)
        group_id = _created_group_id(success)
        if group_id is None:
            raise HueMalformedResponseError(
                f"API returned unexpected result: no group id in {success!r}"
            )

        group = Group(id=group_id, name=name if name is not None else "Group")
        logger.info(f"Created group {group.id}")
        return group

    def get_group(self, group: GroupRef) -> FullGroup:
        self._require_authentication()

        group_id = self._group_id(group)
        result = self._http.get(self.url(resource_path("groups", group_id)))
        self._handle_errors(result)

        full_group = self._parse(result.body, FullGroup)
        full_group.id = group_id
        return full_group

    def set_group_name(self, group: GroupRef, name: str) -> str:
        """Rename a group and return the name the bridge settled on."""
        self._require_authentication()
        group_id = self._modifiable_group_id(group)

        body = self._payload(SetAttributesRequest, name=name)
        result = self._http.put(self.url(resource_path("groups", group_id)), body)
        self._handle_errors(result)

        return self._success_value(result, f"/groups/{encode_segment(group_id)}/name")

    def set_group_lights(self, group: GroupRef, lights: Sequence[LightRef]) -> None:
        self._require_authentication()
        group_id = self._modifiable_group_id(group)

        body = self._payload(SetAttributesRequest, lights=lights)
        result = self._http.put(self.url(resource_path("groups", group_id)), body)
        self._handle_errors(result)

    def set_group_attributes(
        self, group: GroupRef, name: str, lights: Sequence[LightRef]
    ) -> str:
        """Change name and lights of a group and return the new name."""
        self._require_authentication()
        group_id = self._modifiable_group_id(group)

        body = self._payload(SetAttributesRequest, name=name, lights=lights)
        result = self._http.put(self.url(resource_path("groups", group_id)), body)
        self._handle_errors(result)

        return self._success_value(result, f"/groups/{encode_segment(group_id)}/name")

    def set_group_state(self, group: GroupRef, update: StateUpdate) -> None:
        self._require_authentication()
        group_id = self._modifiable_group_id(group)

        path = resource_path("groups", group_id) + "/action"
        result = self._http.put(self.url(path), update.to_json())
        self._handle_errors(result)

    def delete_group(self, group: GroupRef) -> None:
        self._require_authentication()
        group_id = self._modifiable_group_id(group)

        result = self._http.delete(self.url(resource_path("groups", group_id)))
        self._handle_errors(result)
        logger.info(f"Deleted group {group_id}")

    # Users and configuration

    def link(self, devicetype: str, username: Optional[str] = None) -> str:
        """Register with the bridge and return the new username.

        The link button on the bridge must have been pressed shortly before.
        Without ``username`` the bridge generates one.
        """
        if self._username is not None:
            raise HueStateError("already linked")

        body = self._payload(CreateUserRequest, devicetype=devicetype, username=username)
        result = self._http.post(self.url(""), body)
        self._handle_errors(result)

        new_username = self._first_success(result).get("username")
        if not isinstance(new_username, str):
            raise HueMalformedResponseError(
                "API returned unexpected result: no username in success response"
            )

        self._username = new_username
        logger.info(f"Linked with bridge at {self._address} as {devicetype}")
        return new_username

    def unlink(self) -> None:
        """Remove the current user from the bridge whitelist."""
        self._require_authentication()

        path = "config/whitelist/" + encode_segment(self._username)
        result = self._http.delete(self.url(path))
        self._handle_errors(result)

        self._username = None
        logger.info(f"Unlinked from bridge at {self._address}")

    def get_config(self) -> Config:
        """Return the bridge configuration.

        An AuthenticatedConfig with network settings and the whitelist is
        returned when linked, the basic Config otherwise.
        """
        result = self._http.get(self.url("config"))
        self._handle_errors(result)

        if self._username is None:
            return self._parse(result.body, Config)
        return self._parse(result.body, AuthenticatedConfig)

    def set_config(self, update: ConfigUpdate) -> None:
        self._require_authentication()

        result = self._http.put(self.url("config"), update.to_json())
        self._handle_errors(result)

    def get_full_config(self) -> FullConfig:
        """Return the entire datastore of the bridge.

        This is an expensive request for the bridge; prefer the specific
        getters when possible.
        """
        self._require_authentication()

        result = self._http.get(self.url(""))
        self._handle_errors(result)

        return self._parse(result.body, FullConfig)

    # Helpers

    def _require_authentication(self) -> None:
        if self._username is None:
            raise HueAuthenticationRequiredError(
                "linking is required before interacting with the bridge"
            )

    def _handle_errors(self, result: HttpResult) -> None:
        error = interpret_response(result.status_code, result.body)
        if error is None:
            return
        if isinstance(error, HueUnauthorizedError):
            logger.warning(
                f"Bridge at {self._address} no longer accepts the current user: "
                f"{error.description}"
            )
            self._username = None
        raise error

    def _group_id(self, group: GroupRef) -> str:
        group_id = group.id if isinstance(group, Group) else group
        if group_id is None:
            raise HueValidationError("Group has no id")
        return group_id

    def _modifiable_group_id(self, group: GroupRef) -> str:
        if isinstance(group, Group):
            modifiable = group.is_modifiable and group.id != ALL_LIGHTS_GROUP_ID
        else:
            modifiable = group != ALL_LIGHTS_GROUP_ID
        if not modifiable:
            raise HueInvalidGroupMutationError("Group cannot be modified")
        return self._group_id(group)

    @staticmethod
    def _payload(model: Type[M], **fields: Any) -> str:
        try:
            return model(**fields).to_json()
        except ValidationError as e:
            raise HueValidationError(str(e)) from e

    @staticmethod
    def _parse(body: str, model: Type[M]) -> M:
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise HueMalformedResponseError(f"API returned unexpected result: {e}") from e

    @staticmethod
    def _parse_json(body: str, adapter: TypeAdapter) -> Any:
        try:
            return adapter.validate_json(body)
        except ValidationError as e:
            raise HueMalformedResponseError(f"API returned unexpected result: {e}") from e

    @staticmethod
    def _with_ids(resources: Dict[str, T]) -> List[T]:
        result = []
        for resource_id, resource in resources.items():
            resource.id = resource_id
            result.append(resource)
        return result

    def _first_success(self, result: HttpResult) -> Dict[str, Any]:
        entries = self._parse_json(result.body, _success_list)
        if not entries:
            raise HueMalformedResponseError("API returned unexpected result: empty response")
        return entries[0].success

    def _success_value(self, result: HttpResult, key: str) -> str:
        # Requests touching several attributes get one entry per attribute.
        entries = self._parse_json(result.body, _success_list)
        value = next((e.success[key] for e in entries if key in e.success), None)
        if not isinstance(value, str):
            raise HueMalformedResponseError(
                f"API returned unexpected result: no value for {key}"
            )
        return value
