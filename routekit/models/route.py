"""
Route models for the request router.

This module defines route entries, the match plans used to test request
attributes, the read-only request context handed to the matching engine,
and the match result returned to callers.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator, model_validator

from routekit.exceptions import InvalidMatchType, InvalidRoute


class MatchType(str, Enum):
    """Route match types."""
    EXACT = "exact"
    STARTS_WITH = "starts_with"
    REGEX = "regex"
    DEFAULT = "default"


class PlanType(str, Enum):
    """Types of typed match plans."""
    EXACT = "exact"
    STARTS_WITH = "starts_with"
    REGEX = "regex"


def _scalar_to_str(value: Any) -> str:
    """Convert a scalar plan value to the string it is compared as."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise InvalidMatchType("Invalid match plan", InvalidMatchType.BAD_PLAN)


class LiteralPlan(BaseModel):
    """Matches when the target equals the value."""
    model_config = ConfigDict(frozen=True)

    value: str


class OneOfPlan(BaseModel):
    """Matches when the target is one of the values."""
    model_config = ConfigDict(frozen=True)

    values: List[str]


class TypedPlan(BaseModel):
    """Matches using an exact, prefix or regex comparison."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: PlanType
    pattern: Any

    @field_validator("type", mode="before")
    @classmethod
    def _check_type(cls, value: Any) -> PlanType:
        try:
            return PlanType(value)
        except ValueError:
            raise InvalidMatchType(f"Invalid type {value}", InvalidMatchType.UNKNOWN_TYPE) from None

    @model_validator(mode="after")
    def _check_pattern(self) -> "TypedPlan":
        if isinstance(self.pattern, re.Pattern):
            if self.type != PlanType.REGEX:
                raise InvalidMatchType(
                    f"Compiled pattern given for {self.type.value} match",
                    InvalidMatchType.BAD_PLAN
                )
        elif not isinstance(self.pattern, str):
            raise InvalidMatchType("Invalid match plan", InvalidMatchType.BAD_PLAN)
        return self


MatchPlan = Union[LiteralPlan, OneOfPlan, TypedPlan]

_PATH_TYPES = frozenset(plan_type.value for plan_type in PlanType)


def coerce_plan(raw: Any) -> MatchPlan:
    """
    Convert a raw match plan into a plan object.

    Args:
        raw: A scalar, a list of scalars, a {type, pattern} mapping or
             an existing plan object

    Returns:
        The equivalent plan object

    Raises:
        InvalidMatchType: If the value cannot be used as a match plan
    """
    if isinstance(raw, (LiteralPlan, OneOfPlan, TypedPlan)):
        return raw

    if isinstance(raw, Mapping):
        if raw.get("type") is None or raw.get("pattern") is None:
            raise InvalidMatchType("Invalid match plan", InvalidMatchType.BAD_PLAN)
        return TypedPlan(type=raw["type"], pattern=raw["pattern"])

    if isinstance(raw, (list, tuple, set, frozenset)):
        return OneOfPlan(values=[_scalar_to_str(item) for item in raw])

    return LiteralPlan(value=_scalar_to_str(raw))


class Route(BaseModel):
    """
    A single route entry.

    Invariants on type, pattern, action and routes are enforced by the
    resolver when a route list is matched, so a malformed route list can
    be constructed and is rejected before any path is compared.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    type: Optional[str] = Field(default=None, description="Match type: exact, starts_with, regex or default")
    pattern: Optional[Any] = Field(default=None, description="Path pattern string or compiled regex")
    method: Optional[MatchPlan] = Field(default=None, description="Request method plan")
    host: Optional[MatchPlan] = Field(default=None, description="Request host plan")
    headers: Optional[Dict[str, MatchPlan]] = Field(default=None, description="Header name to plan")
    accept: Optional[List[str]] = Field(default=None, description="Offered mime types in preference order")
    tokens: List[str] = Field(default_factory=list, description="Names assigned to captured path tokens")
    action: Optional[Any] = Field(default=None, description="Opaque handler reference")
    routes: Optional[List["Route"]] = Field(default=None, description="Sub-routes")

    _path_plan: Optional[TypedPlan] = PrivateAttr(default=None)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, MatchType):
            return value.value
        return value

    @field_validator("method", "host", mode="before")
    @classmethod
    def _coerce_plan(cls, value: Any) -> Optional[MatchPlan]:
        if value is None:
            return None
        return coerce_plan(value)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_header_plans(cls, value: Any) -> Optional[Dict[str, MatchPlan]]:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise InvalidMatchType("Headers must map header names to match plans", InvalidMatchType.BAD_PLAN)
        return {str(name): coerce_plan(plan) for name, plan in value.items()}

    @field_validator("accept", mode="before")
    @classmethod
    def _normalize_accept(cls, value: Any) -> Optional[List[str]]:
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            return list(value)
        raise InvalidMatchType("Invalid accept value", InvalidMatchType.BAD_ACCEPT)

    @field_validator("routes", mode="before")
    @classmethod
    def _parse_sub_routes(cls, value: Any) -> Optional[List["Route"]]:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            raise InvalidRoute("Sub-routes must be a list of routes", InvalidRoute.UNKNOWN_OPTION)
        return [item if isinstance(item, Route) else Route.parse(item) for item in value]

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "Route":
        """
        Build a route from a plain mapping.

        Args:
            data: Route attributes keyed by field name

        Returns:
            The route

        Raises:
            InvalidRoute: If the mapping has unknown keys or invalid values
        """
        if isinstance(data, Route):
            return data
        if not isinstance(data, Mapping):
            raise InvalidRoute(f"Route entries must be mappings, got {type(data).__name__}")

        for key in data:
            if key not in cls.model_fields:
                raise InvalidRoute(
                    f"Invalid option {key} for pattern {data.get('pattern')}",
                    InvalidRoute.UNKNOWN_OPTION
                )

        try:
            return cls(**data)
        except ValidationError as e:
            raise InvalidRoute(f"Invalid route {data.get('pattern')}: {e}") from e

    @property
    def is_default(self) -> bool:
        return self.type == MatchType.DEFAULT.value

    def model_post_init(self, __context: Any) -> None:
        if self.is_default or self.type not in _PATH_TYPES:
            return
        if isinstance(self.pattern, str) or (
            isinstance(self.pattern, re.Pattern) and self.type == PlanType.REGEX.value
        ):
            self._path_plan = TypedPlan(type=self.type, pattern=self.pattern)

    @property
    def path_plan(self) -> TypedPlan:
        """
        The plan used to match the request path.

        Built once with the route. Routes whose type or pattern cannot form
        a plan raise InvalidMatchType here, when they are first matched.
        """
        if self._path_plan is not None:
            return self._path_plan
        return coerce_plan({"type": self.type, "pattern": self.pattern})


Route.model_rebuild()


@dataclass(frozen=True)
class RequestContext:
    """
    Read-only view of a request presented to the matching engine.

    Header names keep their case but are looked up case-insensitively.
    When host or accept are not given, the Host and Accept headers are used.
    """
    path: str
    method: Optional[str] = None
    host: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    accept: Optional[str] = None

    def get_header(self, name: str) -> Optional[str]:
        """Look up a header value by name, ignoring case."""
        if name in self.headers:
            return self.headers[name]
        lowered = name.lower()
        for header_name, value in self.headers.items():
            if header_name.lower() == lowered:
                return value
        return None

    @property
    def resolved_host(self) -> Optional[str]:
        if self.host is not None:
            return self.host
        return self.get_header("host")

    @property
    def resolved_accept(self) -> Optional[str]:
        if self.accept is not None:
            return self.accept
        return self.get_header("accept")


Tokens = Union[List[str], Dict[str, str]]


@dataclass
class RouteMatch:
    """
    Result of matching a route.

    Holds the matched route together with the request values that
    satisfied it. A default route fallback carries no annotations.
    """
    route: Route
    tokens: Optional[Tokens] = None
    method: Optional[str] = None
    host: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    accept: Optional[str] = None

    @property
    def action(self) -> Any:
        return self.route.action

    @property
    def routes(self) -> Optional[List[Route]]:
        return self.route.routes

    @property
    def type(self) -> Optional[str]:
        return self.route.type

    @property
    def pattern(self) -> Any:
        return self.route.pattern

    @property
    def is_default(self) -> bool:
        return self.route.is_default
