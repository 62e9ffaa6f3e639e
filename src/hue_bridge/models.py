"""Data models for bridge resources and request payloads."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

ALL_LIGHTS_GROUP_ID = ""
ALL_LIGHTS_GROUP_NAME = "Group 0"


def _parse_date(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.strptime(value, DATE_FORMAT)
        except ValueError:
            return None
    return value


# Read side


class LightState(BaseModel):
    """Current state of a light, or the last action sent to a group."""

    model_config = ConfigDict(extra="allow")

    on: Optional[bool] = None
    bri: Optional[int] = None
    hue: Optional[int] = None
    sat: Optional[int] = None
    xy: Optional[List[float]] = None
    ct: Optional[int] = None
    alert: Optional[str] = None
    effect: Optional[str] = None
    colormode: Optional[str] = None
    reachable: Optional[bool] = None


class Light(BaseModel):
    """Light as listed in the lights collection."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(default=None, exclude=True)
    name: str


class FullLight(Light):
    """Detailed light information."""

    state: LightState = Field(default_factory=LightState)
    type: Optional[str] = None
    modelid: Optional[str] = None
    swversion: Optional[str] = None
    pointsymbol: Optional[Dict[str, str]] = None


class Group(BaseModel):
    """Group as listed in the groups collection."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(default=None, exclude=True)
    name: str
    modifiable: bool = Field(default=True, exclude=True)

    @property
    def is_modifiable(self) -> bool:
        return self.modifiable

    @classmethod
    def all_lights(cls) -> "Group":
        """The implicit group containing every light known to the bridge."""
        return cls(id=ALL_LIGHTS_GROUP_ID, name=ALL_LIGHTS_GROUP_NAME, modifiable=False)


class FullGroup(Group):
    """Detailed group information."""

    lights: List[str] = Field(default_factory=list)
    action: LightState = Field(default_factory=LightState)
    type: Optional[str] = None


class User(BaseModel):
    """Whitelist entry of the bridge configuration."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, exclude=True)
    name: str
    created: Optional[datetime] = Field(default=None, alias="create date")
    last_used: Optional[datetime] = Field(default=None, alias="last use date")

    @field_validator("created", "last_used", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)


class Config(BaseModel):
    """Bridge configuration visible without a username."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    swversion: str
    apiversion: Optional[str] = None
    mac: Optional[str] = None
    bridgeid: Optional[str] = None
    modelid: Optional[str] = None


class AuthenticatedConfig(Config):
    """Bridge configuration visible to a whitelisted user."""

    whitelist: Dict[str, User] = Field(default_factory=dict)
    ipaddress: Optional[str] = None
    netmask: Optional[str] = None
    gateway: Optional[str] = None
    dhcp: Optional[bool] = None
    proxyaddress: Optional[str] = None
    proxyport: Optional[int] = None
    utc: Optional[datetime] = Field(default=None, alias="UTC")
    linkbutton: Optional[bool] = None
    portalservices: Optional[bool] = None
    swupdate: Optional[Dict[str, Any]] = None

    @field_validator("utc", mode="before")
    @classmethod
    def parse_utc(cls, v):
        return _parse_date(v)

    def users(self) -> List[User]:
        """Whitelisted users with their ids set."""
        users = []
        for user_id, user in self.whitelist.items():
            user.id = user_id
            users.append(user)
        return users


class FullConfig(BaseModel):
    """The complete bridge datastore as returned by the API root."""

    model_config = ConfigDict(extra="ignore")

    lights: Dict[str, FullLight] = Field(default_factory=dict)
    groups: Dict[str, FullGroup] = Field(default_factory=dict)
    config: AuthenticatedConfig
    schedules: Dict[str, Any] = Field(default_factory=dict)

    def light_list(self) -> List[FullLight]:
        result = []
        for light_id, light in self.lights.items():
            light.id = light_id
            result.append(light)
        return result

    def group_list(self) -> List[FullGroup]:
        result = []
        for group_id, group in self.groups.items():
            group.id = group_id
            result.append(group)
        return result


class ErrorDetail(BaseModel):
    type: int
    address: Optional[str] = None
    description: str


class ErrorResponse(BaseModel):
    """One element of an error response array."""

    error: ErrorDetail


class SuccessResponse(BaseModel):
    """One element of a success response array."""

    success: Dict[str, Any]


class NewLightsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lastscan: str


# Write side


class _Payload(BaseModel):
    """Base for request bodies: only fields that were set are sent."""

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True, by_alias=True)


class StateUpdate(_Payload):
    """Changes to the state of a light or group.

    Fields can be passed to the constructor or set through the chainable
    helpers::

        StateUpdate().turn_on().set_brightness(200).set_transition_time(10)
    """

    on: Optional[bool] = None
    bri: Optional[int] = Field(default=None, ge=0, le=255)
    hue: Optional[int] = Field(default=None, ge=0, le=65535)
    sat: Optional[int] = Field(default=None, ge=0, le=255)
    xy: Optional[List[float]] = Field(default=None, min_length=2, max_length=2)
    ct: Optional[int] = Field(default=None, ge=153, le=500)
    alert: Optional[Literal["none", "select", "lselect"]] = None
    effect: Optional[Literal["none", "colorloop"]] = None
    transitiontime: Optional[int] = Field(default=None, ge=0)
    bri_inc: Optional[int] = Field(default=None, ge=-254, le=254)
    sat_inc: Optional[int] = Field(default=None, ge=-254, le=254)
    hue_inc: Optional[int] = Field(default=None, ge=-65534, le=65534)
    ct_inc: Optional[int] = Field(default=None, ge=-65534, le=65534)

    @field_validator("xy")
    @classmethod
    def validate_xy(cls, v):
        if v is not None and any(c < 0.0 or c > 1.0 for c in v):
            raise ValueError("xy coordinates must be within [0, 1]")
        return v

    def turn_on(self) -> "StateUpdate":
        self.on = True
        return self

    def turn_off(self) -> "StateUpdate":
        self.on = False
        return self

    def set_brightness(self, bri: int) -> "StateUpdate":
        self.bri = bri
        return self

    def set_hue(self, hue: int) -> "StateUpdate":
        self.hue = hue
        return self

    def set_saturation(self, sat: int) -> "StateUpdate":
        self.sat = sat
        return self

    def set_xy(self, x: float, y: float) -> "StateUpdate":
        self.xy = [x, y]
        return self

    def set_color_temperature(self, ct: int) -> "StateUpdate":
        self.ct = ct
        return self

    def set_alert(self, alert: str) -> "StateUpdate":
        self.alert = alert
        return self

    def set_effect(self, effect: str) -> "StateUpdate":
        self.effect = effect
        return self

    def set_transition_time(self, deciseconds: int) -> "StateUpdate":
        self.transitiontime = deciseconds
        return self

    def increase_brightness(self, delta: int) -> "StateUpdate":
        self.bri_inc = delta
        return self


class ConfigUpdate(_Payload):
    """Changes to the bridge configuration."""

    name: Optional[str] = Field(default=None, min_length=4, max_length=16)
    proxyaddress: Optional[str] = Field(default=None, max_length=40)
    proxyport: Optional[int] = Field(default=None, ge=0, le=65535)
    ipaddress: Optional[str] = None
    netmask: Optional[str] = None
    gateway: Optional[str] = None
    dhcp: Optional[bool] = None
    linkbutton: Optional[bool] = None
    portalservices: Optional[bool] = None
    utc: Optional[datetime] = Field(default=None, alias="UTC")

    @field_serializer("utc")
    def serialize_utc(self, value: Optional[datetime]) -> Optional[str]:
        return value.strftime(DATE_FORMAT) if value is not None else None


LightRef = Union[Light, str]


def light_ids(lights: Sequence[LightRef]) -> List[str]:
    return [light.id if isinstance(light, Light) else light for light in lights]


class SetAttributesRequest(_Payload):
    """New name and/or member lights of a light or group."""

    name: Optional[str] = Field(default=None, max_length=32)
    lights: Optional[List[str]] = Field(default=None, min_length=1, max_length=16)

    @field_validator("lights", mode="before")
    @classmethod
    def coerce_lights(cls, v):
        if v is None:
            return v
        if isinstance(v, str):
            raise ValueError("lights must be a sequence of lights or ids, not a string")
        return light_ids(v)


class CreateUserRequest(_Payload):
    devicetype: str = Field(max_length=40)
    username: Optional[str] = Field(default=None, min_length=10, max_length=40)
