"""Test fixtures for router tests."""

import pytest
import yaml

from routekit.models.route import RequestContext, Route
from routekit.routing import ContentNegotiator, PatternMatcher, RouteMatcher, RouteResolver, Router


@pytest.fixture
def pattern_matcher():
    """Create a pattern matcher."""
    return PatternMatcher()


@pytest.fixture
def negotiator():
    """Create a content negotiator."""
    return ContentNegotiator()


@pytest.fixture
def route_matcher():
    """Create a route matcher."""
    return RouteMatcher()


@pytest.fixture
def resolver():
    """Create a route resolver."""
    return RouteResolver()


@pytest.fixture
def make_request():
    """Factory for request contexts with sensible defaults."""
    def _make_request(path="/", method="GET", host="www.example.com", headers=None, accept=None):
        return RequestContext(
            path=path,
            method=method,
            host=host,
            headers=headers or {},
            accept=accept
        )
    return _make_request


@pytest.fixture
def sample_routes():
    """Create a sample route table covering each match type."""
    return [
        Route(type="exact", pattern="/", action="Home"),
        Route(type="exact", pattern="/users", action="ListUsers", method="GET"),
        Route(type="exact", pattern="/users", action="CreateUser", method="POST"),
        Route(type="regex", pattern=r"^/users/(\d+)$", action="GetUser", tokens=["id"]),
        Route(
            type="starts_with",
            pattern="/api",
            routes=[
                Route(type="exact", pattern="/api/status", action="ApiStatus", accept=["application/json"]),
                Route(type="starts_with", pattern="/api/files", action="ApiFiles"),
            ]
        ),
        Route(type="default", action="NotFound"),
    ]


@pytest.fixture
def sample_router(sample_routes):
    """Create a router over the sample route table."""
    return Router(routes=sample_routes)


@pytest.fixture
def sample_routes_config():
    """Create a sample route configuration as it would appear in routes.yaml."""
    return {
        "settings": {
            "log_level": "DEBUG",
            "ending_slash": False
        },
        "routes": [
            {
                "type": "exact",
                "pattern": "/",
                "action": "Home"
            },
            {
                "type": "regex",
                "pattern": r"^/articles/(\d{4})/([a-z-]+)$",
                "tokens": ["year", "slug"],
                "method": ["GET", "HEAD"],
                "action": "Article"
            },
            {
                "type": "starts_with",
                "pattern": "/admin",
                "host": {"type": "regex", "pattern": r"^admin\."},
                "routes": [
                    {"type": "exact", "pattern": "/admin/", "action": "AdminHome"},
                    {"type": "default", "action": "AdminNotFound"}
                ]
            },
            {
                "type": "default",
                "action": "NotFound"
            }
        ]
    }


@pytest.fixture
def config_dir(tmp_path, sample_routes_config):
    """Create a config directory holding routes.yaml."""
    directory = tmp_path / "config"
    directory.mkdir()
    with open(directory / "routes.yaml", "w") as f:
        yaml.dump(sample_routes_config, f)
    return directory
