"""
Route resolver for the request router.

Walks an ordered route list, validates it, matches each candidate and
recurses into sub-route lists. The first matching route wins; a default
route is returned when nothing else matches.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union

from routekit.config import get_logger
from routekit.exceptions import InvalidRoute
from routekit.models.route import RequestContext, Route, RouteMatch
from routekit.routing.matcher import RouteMatcher

logger = get_logger(__name__)

RouteEntry = Union[Route, Mapping[str, Any]]


def _has_action(route: Route) -> bool:
    return route.action is not None and route.action != ""


def _has_routes(route: Route) -> bool:
    return bool(route.routes)


def validate_routes(routes: Iterable[RouteEntry]) -> List[Route]:
    """
    Validate a route list.

    Args:
        routes: Route entries, as Route objects or mappings

    Returns:
        The entries as Route objects, in order

    Raises:
        InvalidRoute: If an entry breaks a route invariant or the list
                      holds more than one default route
    """
    validated = []
    has_default = False

    for entry in routes:
        route = Route.parse(entry)

        if not route.type:
            raise InvalidRoute("No type set for route", InvalidRoute.NO_TYPE)

        if _has_action(route) and _has_routes(route):
            raise InvalidRoute(
                "Routes should include an action or routes, but not both",
                InvalidRoute.ACTION_AND_ROUTES
            )

        if not _has_action(route) and not _has_routes(route):
            raise InvalidRoute("Routes must include an action or routes", InvalidRoute.NO_ACTION_OR_ROUTES)

        if route.is_default:
            if has_default:
                raise InvalidRoute("Multiple default routes defined", InvalidRoute.MULTIPLE_DEFAULTS)
            has_default = True
        elif route.pattern is None or route.pattern == "":
            raise InvalidRoute("No pattern set for route", InvalidRoute.NO_PATTERN)

        validated.append(route)

    return validated


class RouteResolver:
    """
    Resolves a request to a route from an ordered route list.

    Resolution is first match wins in declaration order. A route whose
    own conditions match commits the search to its sub-routes: if none of
    them match, later siblings are not tried and only the default route
    of the list can still answer the request.
    """

    def __init__(self, matcher: Optional[RouteMatcher] = None):
        """
        Initialize the resolver.

        Args:
            matcher: Route matcher used for each candidate
        """
        self.matcher = matcher or RouteMatcher()

    def resolve(self, routes: Iterable[RouteEntry], request: RequestContext) -> Optional[RouteMatch]:
        """
        Find the route for a request.

        Args:
            routes: Ordered route entries
            request: Request context

        Returns:
            The matched route, the default route if nothing matched, or
            None if there is neither

        Raises:
            InvalidRoute: If the route list is malformed
            InvalidMatchType: If a match plan is malformed
            InvalidPattern: If a regex does not compile
        """
        return self._resolve(routes, request, depth=0)

    def _resolve(self, routes: Iterable[RouteEntry], request: RequestContext, depth: int) -> Optional[RouteMatch]:
        candidates = validate_routes(routes)
        default_route = next((route for route in candidates if route.is_default), None)

        for route in candidates:
            if route.is_default:
                continue

            match = self.matcher.match_route(route, request)
            if match is None:
                continue

            if _has_routes(route):
                match = self._resolve(route.routes, request, depth + 1)
                if match is None:
                    logger.debug(
                        "Sub-routes did not match",
                        extra={"path": request.path, "route_pattern": str(route.pattern), "depth": depth}
                    )
                    break

            logger.debug(
                "Route matched",
                extra={
                    "path": request.path,
                    "method": request.method,
                    "route_type": match.type,
                    "route_pattern": str(match.pattern),
                    "depth": depth
                }
            )
            return match

        if default_route is not None:
            logger.debug(
                "Using default route",
                extra={"path": request.path, "method": request.method, "depth": depth}
            )
            return RouteMatch(route=default_route)

        logger.debug(
            "No route matched",
            extra={"path": request.path, "method": request.method, "total_routes": len(candidates), "depth": depth}
        )
        return None
