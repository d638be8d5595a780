"""
Route matcher for the request router.

Checks a single route entry against a request, dimension by dimension:
path, method, headers, accept and host. Each check receives the match
built so far and returns it annotated, or None to stop the chain.
"""

from typing import Dict, List, Optional

from routekit.config import get_logger
from routekit.models.route import RequestContext, Route, RouteMatch
from routekit.routing.negotiation import ContentNegotiator
from routekit.routing.pattern import PatternMatcher

logger = get_logger(__name__)


def split_path_tokens(remainder: str) -> List[str]:
    """
    Split the remainder of a prefix match into path segments.

    Examples:
        "/1/2/" -> ["1", "2"]
        "/1" -> ["1"]
    """
    return remainder.strip("/").split("/")


class RouteMatcher:
    """
    Combined route matcher.

    Matches requests based on:
    - Path (exact, prefix or regex, with token capture)
    - HTTP method
    - Headers
    - Accept header content negotiation
    - Host
    """

    def __init__(
        self,
        pattern_matcher: Optional[PatternMatcher] = None,
        negotiator: Optional[ContentNegotiator] = None
    ):
        """
        Initialize the route matcher.

        Args:
            pattern_matcher: Matcher for individual plans
            negotiator: Accept header negotiator
        """
        self.pattern_matcher = pattern_matcher or PatternMatcher()
        self.negotiator = negotiator or ContentNegotiator()

    def match_route(self, route: Route, request: RequestContext) -> Optional[RouteMatch]:
        """
        Check if a route matches the request.

        Args:
            route: Route entry
            request: Request context

        Returns:
            The annotated match, or None if any dimension fails
        """
        match = self.match_path(route, request.path)
        if match is not None:
            match = self.match_method(match, request)
        if match is not None:
            match = self.match_headers(match, request)
        if match is not None:
            match = self.match_accept(match, request)
        if match is not None:
            match = self.match_host(match, request)
        return match

    def match_path(self, route: Route, path: str) -> Optional[RouteMatch]:
        """
        Match the request path and capture tokens.

        Prefix matches capture the remainder of the path split into
        segments. When the route names its tokens, the number captured
        must equal the number of names.
        """
        tokens = self.pattern_matcher.match(route.path_plan, path)
        if tokens is None:
            return None

        if isinstance(tokens, str):
            tokens = split_path_tokens(tokens)

        if route.tokens:
            if len(tokens) != len(route.tokens):
                logger.debug(
                    "Token count mismatch",
                    extra={
                        "path": path,
                        "expected_tokens": len(route.tokens),
                        "captured_tokens": len(tokens)
                    }
                )
                return None
            return RouteMatch(route=route, tokens=dict(zip(route.tokens, tokens)))

        return RouteMatch(route=route, tokens=tokens)

    def match_method(self, match: RouteMatch, request: RequestContext) -> Optional[RouteMatch]:
        """Match the request method; an unrestricted route records it as is."""
        if match.route.method is not None:
            if request.method is None or not self.pattern_matcher.matches(match.route.method, request.method):
                return None
            match.method = request.method
        elif request.method:
            match.method = request.method
        return match

    def match_headers(self, match: RouteMatch, request: RequestContext) -> Optional[RouteMatch]:
        """
        Match every header the route declares.

        Only declared headers are recorded, keyed by the route's spelling
        of the header name.
        """
        if not match.route.headers:
            return match

        matched: Dict[str, str] = {}
        for name, plan in match.route.headers.items():
            value = request.get_header(name)
            if value is None or not self.pattern_matcher.matches(plan, value):
                return None
            matched[name] = value

        match.headers = matched
        return match

    def match_accept(self, match: RouteMatch, request: RequestContext) -> Optional[RouteMatch]:
        """Negotiate the response mime type against the offered list."""
        if not match.route.accept:
            return match

        chosen = self.negotiator.negotiate(match.route.accept, request.resolved_accept)
        if chosen is None:
            return None
        match.accept = chosen
        return match

    def match_host(self, match: RouteMatch, request: RequestContext) -> Optional[RouteMatch]:
        """Match the request host."""
        if match.route.host is None:
            return match

        host = request.resolved_host
        if host is None or not self.pattern_matcher.matches(match.route.host, host):
            return None
        match.host = host
        return match
