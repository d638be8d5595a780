"""
Request routing package.

This package contains the pattern matcher, content negotiator, route
matcher and resolver that make up the matching engine, plus the Router
that holds a route table.
"""

from .pattern import PatternMatcher, compile_pattern
from .negotiation import ContentNegotiator, parse_accept_header, media_range_matches
from .matcher import RouteMatcher
from .resolver import RouteResolver, validate_routes
from .router import Router

__all__ = [
    "PatternMatcher",
    "compile_pattern",
    "ContentNegotiator",
    "parse_accept_header",
    "media_range_matches",
    "RouteMatcher",
    "RouteResolver",
    "validate_routes",
    "Router",
]
