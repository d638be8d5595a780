"""Unit tests for route list resolution."""

import pytest

from routekit.exceptions import InvalidRoute
from routekit.models.route import RequestContext, Route
from routekit.routing.matcher import RouteMatcher
from routekit.routing.resolver import RouteResolver, validate_routes


class TestResolve:
    """Test cases for first-match-wins resolution."""

    def test_resolve_exact(self, resolver):
        """Test an exact route resolves with no tokens."""
        routes = [
            {"type": "exact", "pattern": "/foo", "action": "Foo"},
            {"type": "exact", "pattern": "/foo/bar", "action": "FooBar"},
        ]

        match = resolver.resolve(routes, RequestContext(path="/foo/bar"))
        assert match.action == "FooBar"
        assert match.tokens == []

        match = resolver.resolve(routes, RequestContext(path="/foo"))
        assert match.action == "Foo"
        assert match.tokens == []

    def test_resolve_no_match(self, resolver):
        """Test a path matching no route resolves to None."""
        routes = [
            {"type": "exact", "pattern": "/foo", "action": "Foo"},
            {"type": "exact", "pattern": "/foo/bar", "action": "FooBar"},
        ]

        assert resolver.resolve(routes, RequestContext(path="/foo/bar/baz")) is None

    def test_resolve_first_match_wins(self, resolver):
        """Test declaration order decides between overlapping routes."""
        routes = [
            Route(type="starts_with", pattern="/foo", action="Prefix"),
            Route(type="exact", pattern="/foo/bar", action="Exact"),
        ]

        assert resolver.resolve(routes, RequestContext(path="/foo/bar")).action == "Prefix"

    def test_resolve_default_route(self, resolver):
        """Test the default route is returned unchanged when nothing matches."""
        default = Route(type="default", pattern="", action="FooBar")
        routes = [Route(type="exact", pattern="/foo", action="Foo"), default]

        match = resolver.resolve(routes, RequestContext(path="/bar"))
        assert match.route is default
        assert match.is_default
        assert match.tokens is None
        assert match.method is None

        match = resolver.resolve(routes, RequestContext(path="/foo"))
        assert match.action == "Foo"
        assert match.tokens == []

    def test_resolve_default_route_position(self, resolver):
        """Test a default route declared first does not shadow later routes."""
        routes = [
            {"type": "default", "action": "NotFound"},
            {"type": "exact", "pattern": "/foo", "action": "Foo"},
        ]

        assert resolver.resolve(routes, RequestContext(path="/foo")).action == "Foo"
        assert resolver.resolve(routes, RequestContext(path="/bar")).action == "NotFound"

    def test_resolve_method_filters(self, resolver, sample_routes, make_request):
        """Test routes sharing a path are told apart by method."""
        assert resolver.resolve(sample_routes, make_request("/users", method="GET")).action == "ListUsers"
        assert resolver.resolve(sample_routes, make_request("/users", method="POST")).action == "CreateUser"
        assert resolver.resolve(sample_routes, make_request("/users", method="PUT")).action == "NotFound"

    def test_resolve_named_regex_tokens(self, resolver, sample_routes, make_request):
        """Test regex tokens are named on the resolved match."""
        match = resolver.resolve(sample_routes, make_request("/users/42"))

        assert match.action == "GetUser"
        assert match.tokens == {"id": "42"}
        assert match.method == "GET"


class TestSubRoutes:
    """Test cases for nested route lists."""

    @pytest.fixture
    def nested_routes(self):
        return [
            {
                "type": "starts_with",
                "pattern": "/foo",
                "routes": [
                    {"type": "exact", "pattern": "/foo/bar", "action": "A"},
                    {"type": "exact", "pattern": "/foo/baz", "action": "B"},
                ]
            },
            {"type": "starts_with", "pattern": "/foo/qux", "action": "Sibling"},
        ]

    def test_sub_route_match(self, resolver, nested_routes):
        """Test a request resolves to the matching sub-route."""
        match = resolver.resolve(nested_routes, RequestContext(path="/foo/bar"))

        assert match.action == "A"
        assert match.type == "exact"
        assert match.tokens == []

        assert resolver.resolve(nested_routes, RequestContext(path="/foo/baz")).action == "B"

    def test_sub_route_dead_end(self, resolver, nested_routes):
        """Test a matched parent with no matching sub-route resolves to None."""
        assert resolver.resolve(nested_routes, RequestContext(path="/foo/qux")) is None
        assert resolver.resolve(nested_routes, RequestContext(path="/foo/ber")) is None

    def test_sub_route_dead_end_uses_default(self, resolver):
        """Test the list's default route answers after a sub-route dead end."""
        routes = [
            {
                "type": "starts_with",
                "pattern": "/foo",
                "routes": [{"type": "exact", "pattern": "/foo/bar", "action": "A"}]
            },
            {"type": "default", "action": "NotFound"},
        ]

        match = resolver.resolve(routes, RequestContext(path="/foo/zzz"))
        assert match is not None
        assert match.action == "NotFound"
        assert match.tokens is None
        assert resolver.resolve(routes, RequestContext(path="/zzz")).action == "NotFound"

    def test_sub_route_dead_end_skips_siblings_before_default(self, resolver):
        """Test later siblings are skipped after a dead end, whatever the default's position."""
        routes = [
            {"type": "default", "action": "NotFound"},
            {
                "type": "starts_with",
                "pattern": "/foo",
                "routes": [{"type": "exact", "pattern": "/foo/bar", "action": "A"}]
            },
            {"type": "starts_with", "pattern": "/foo/qux", "action": "Sibling"},
        ]

        assert resolver.resolve(routes, RequestContext(path="/foo/qux")).action == "NotFound"
        assert resolver.resolve(routes, RequestContext(path="/foo/bar")).action == "A"

    def test_sub_route_default(self, resolver, sample_routes_config):
        """Test a default route inside a sub-route list."""
        routes = sample_routes_config["routes"]
        request = RequestContext(path="/admin/users", host="admin.example.com")

        assert resolver.resolve(routes, request).action == "AdminNotFound"

    def test_parent_conditions_apply(self, resolver, sample_routes_config):
        """Test the parent's conditions gate its sub-routes."""
        routes = sample_routes_config["routes"]
        request = RequestContext(path="/admin/", host="www.example.com")

        assert resolver.resolve(routes, request).action == "NotFound"

    def test_deeply_nested(self, resolver):
        """Test resolution recurses through several levels."""
        routes = [
            Route(type="starts_with", pattern="/a", routes=[
                Route(type="starts_with", pattern="/a/b", routes=[
                    Route(type="regex", pattern=r"^/a/b/(\w+)$", tokens=["leaf"], action="Leaf"),
                ]),
            ]),
        ]

        match = resolver.resolve(routes, RequestContext(path="/a/b/c"))
        assert match.action == "Leaf"
        assert match.tokens == {"leaf": "c"}


class TestValidation:
    """Test cases for route list validation."""

    @pytest.mark.parametrize("routes,code", [
        ([{"pattern": "/", "action": "Foo"}], InvalidRoute.NO_TYPE),
        (
            [{
                "type": "exact",
                "pattern": "/",
                "action": "Foo",
                "routes": [{"type": "exact", "pattern": "/", "action": "Foo"}]
            }],
            InvalidRoute.ACTION_AND_ROUTES
        ),
        ([{"type": "exact", "pattern": "/"}], InvalidRoute.NO_ACTION_OR_ROUTES),
        (
            [{"type": "default", "action": "Foo"}, {"type": "default", "action": "Bar"}],
            InvalidRoute.MULTIPLE_DEFAULTS
        ),
        ([{"type": "exact", "action": "Foo"}], InvalidRoute.NO_PATTERN),
        ([{"type": "exact", "pattern": "", "action": "Foo"}], InvalidRoute.NO_PATTERN),
        ([{"type": "exact", "pattern": "/", "action": "Foo", "bad-value": True}], InvalidRoute.UNKNOWN_OPTION),
    ])
    def test_bad_routes(self, resolver, routes, code):
        """Test each route invariant is enforced."""
        with pytest.raises(InvalidRoute) as exc_info:
            resolver.resolve(routes, RequestContext(path="/"))

        assert exc_info.value.code == code

    def test_default_route_needs_action(self):
        """Test a default route still needs an action or routes."""
        with pytest.raises(InvalidRoute) as exc_info:
            validate_routes([{"type": "default"}])

        assert exc_info.value.code == InvalidRoute.NO_ACTION_OR_ROUTES

    def test_validation_before_matching(self):
        """Test an invalid entry after a matching route is still rejected."""
        class RecordingMatcher(RouteMatcher):
            calls = 0

            def match_route(self, route, request):
                RecordingMatcher.calls += 1
                return super().match_route(route, request)

        resolver = RouteResolver(matcher=RecordingMatcher())
        routes = [
            {"type": "exact", "pattern": "/", "action": "Home"},
            {"type": "default", "action": "Foo"},
            {"type": "default", "action": "Bar"},
        ]

        with pytest.raises(InvalidRoute):
            resolver.resolve(routes, RequestContext(path="/"))

        assert RecordingMatcher.calls == 0

    def test_validate_routes_returns_routes(self):
        """Test mappings are converted to Route objects in order."""
        routes = validate_routes([
            {"type": "exact", "pattern": "/a", "action": "A"},
            Route(type="default", action="D"),
        ])

        assert [route.action for route in routes] == ["A", "D"]
        assert all(isinstance(route, Route) for route in routes)


class TestHeaderResolution:
    """Test cases for header conditions during resolution."""

    def test_header_case_insensitive(self, resolver):
        """Test a route requiring 'host' matches a request sending 'Host'."""
        routes = [{"type": "exact", "pattern": "/", "action": "Home", "headers": {"host": "www.example.com"}}]
        request = RequestContext(path="/", headers={"Host": "www.example.com"})

        match = resolver.resolve(routes, request)

        assert match.headers == {"host": "www.example.com"}
        assert "Host" not in match.headers

    def test_accept_routes(self, resolver, sample_routes, make_request):
        """Test a sub-route offering JSON negotiates against the request."""
        match = resolver.resolve(sample_routes, make_request("/api/status", accept="text/html, */*;q=0.5"))
        assert match.action == "ApiStatus"
        assert match.accept == "application/json"

        assert resolver.resolve(sample_routes, make_request("/api/status", accept="text/html")).action == "NotFound"
