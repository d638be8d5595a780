"""
routekit - HTTP request to route resolution.

Resolves a request to a configured route by matching its path, method,
host, headers and Accept header against an ordered route table.
"""

from routekit.exceptions import InvalidMatchType, InvalidPattern, InvalidRoute, RoutingError
from routekit.models.route import (
    LiteralPlan,
    MatchType,
    OneOfPlan,
    PlanType,
    RequestContext,
    Route,
    RouteMatch,
    TypedPlan,
    coerce_plan,
)
from routekit.routing import (
    ContentNegotiator,
    PatternMatcher,
    RouteMatcher,
    RouteResolver,
    Router,
)

__version__ = "1.0.0"

__all__ = [
    "ContentNegotiator",
    "InvalidMatchType",
    "InvalidPattern",
    "InvalidRoute",
    "LiteralPlan",
    "MatchType",
    "OneOfPlan",
    "PatternMatcher",
    "PlanType",
    "RequestContext",
    "Route",
    "RouteMatch",
    "RouteMatcher",
    "RouteResolver",
    "Router",
    "RoutingError",
    "TypedPlan",
    "coerce_plan",
]
