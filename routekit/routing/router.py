"""
Router - route table and request resolution.

The Router keeps an ordered route table, offers builders that validate
route options, and resolves requests against the table. The action of
the matched route means nothing to the router; callers use it to answer
the request.
"""

import time
from typing import Any, Iterable, List, Mapping, Optional

from routekit.config import RouterSettings, StructuredLogger, get_logger
from routekit.exceptions import RoutingError
from routekit.models.route import RequestContext, Route, RouteMatch
from routekit.routing.resolver import RouteEntry, RouteResolver
from routekit.utils.helpers import normalize_request_path

logger = get_logger(__name__)
structured_logger = StructuredLogger(__name__)


class Router:
    """
    Request Router.

    Features:
    - Exact, prefix and regex path routes with token capture
    - Method, host, header and Accept conditions
    - Nested sub-route tables
    - A single default route per table

    Usage:
        router = Router()
        router.add("exact", "/users", "list_users", method="GET")
        router.add("regex", r"^/users/(\\d+)$", "get_user", tokens=["id"])
        router.add("default", None, "not_found")

        match = router.match_path("/users/42", method="GET")
        if match:
            handler = handlers[match.action]
    """

    def __init__(
        self,
        routes: Optional[Iterable[RouteEntry]] = None,
        settings: Optional[RouterSettings] = None,
        resolver: Optional[RouteResolver] = None
    ):
        """
        Initialize the router.

        Args:
            routes: Initial route table, as Route objects or mappings
            settings: Router settings; path normalization is taken from here
            resolver: Resolver used to match requests
        """
        self._routes: List[Route] = [Route.parse(route) for route in routes or []]
        self.settings = settings
        self.resolver = resolver or RouteResolver()

    def create_route(self, type: str, pattern: Any, **options: Any) -> Route:
        """
        Create a route entry, validating its options.

        Args:
            type: Match type: exact, regex, starts_with or default. A table
                  should hold only one default route.
            pattern: Path string or regular expression
            **options: method, host, headers, accept, tokens, and one of
                       action or routes

        Returns:
            The route

        Raises:
            InvalidRoute: If an option is not a route attribute
        """
        return Route.parse({"type": type, "pattern": pattern, **options})

    def add(self, type: str, pattern: Any, action: Any, **options: Any) -> "Router":
        """
        Add a route to the table.

        Args:
            type: Match type
            pattern: Path string or regular expression
            action: What to do when the route matches; opaque to the router
            **options: Additional route conditions
        """
        route = self.create_route(type, pattern, action=action, **options)
        self._routes.append(route)
        return self

    def add_map(
        self,
        type: str,
        pattern: Any,
        routes: Iterable[Mapping[str, Any]],
        **options: Any
    ) -> "Router":
        """
        Add a route whose sub-routes decide the final match.

        Sub-route mappings without their own type or pattern inherit
        the parent's.

        Args:
            type: Match type
            pattern: Path string or regular expression
            routes: Sub-route mappings
            **options: Additional route conditions
        """
        sub_routes = []
        for entry in routes:
            entry = dict(entry)
            route_type = entry.pop("type", type)
            route_pattern = entry.pop("pattern", pattern)
            sub_routes.append(self.create_route(route_type, route_pattern, **entry))

        route = self.create_route(type, pattern, routes=sub_routes, **options)
        self._routes.append(route)
        return self

    def get_routes(self) -> List[Route]:
        """
        Get the route table.

        Useful for backing up a table built at runtime, e.g. from a database.
        """
        return self._routes.copy()

    def match(self, request: RequestContext) -> Optional[RouteMatch]:
        """
        Resolve a request against the route table.

        Args:
            request: Request context

        Returns:
            The matched route, the default route, or None

        Raises:
            RoutingError: If the route table or a match plan is malformed
        """
        if self.settings is not None:
            path = normalize_request_path(request.path, self.settings)
            if path != request.path:
                logger.debug(f"Normalized request path {request.path} -> {path}")
                request = RequestContext(
                    path=path,
                    method=request.method,
                    host=request.host,
                    headers=request.headers,
                    accept=request.accept
                )

        start = time.perf_counter()
        try:
            match = self.resolver.resolve(self._routes, request)
        except RoutingError as e:
            structured_logger.log_routing_error(request.path, e, method=request.method)
            raise

        structured_logger.log_resolution(
            path=request.path,
            method=request.method,
            matched=match is not None,
            elapsed_ms=(time.perf_counter() - start) * 1000,
            action=match.action if match else None
        )
        return match

    def match_path(
        self,
        path: str,
        method: Optional[str] = None,
        host: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        accept: Optional[str] = None
    ) -> Optional[RouteMatch]:
        """Resolve a request given as its individual parts."""
        return self.match(RequestContext(
            path=path,
            method=method,
            host=host,
            headers=headers or {},
            accept=accept
        ))
