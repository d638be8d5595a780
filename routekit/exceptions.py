"""
Routing exceptions.

All errors raised by the matching engine derive from RoutingError. They
signal configuration or programming defects and are never retried.
"""


class RoutingError(Exception):
    """Base exception for route matching errors."""

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


class InvalidRoute(RoutingError):
    """A route entry or route list is malformed."""

    NO_TYPE = 1
    ACTION_AND_ROUTES = 2
    NO_ACTION_OR_ROUTES = 3
    MULTIPLE_DEFAULTS = 4
    NO_PATTERN = 5
    UNKNOWN_OPTION = 6


class InvalidMatchType(RoutingError):
    """A match plan has an unknown type or an unsupported shape."""

    BAD_PLAN = 1
    UNKNOWN_TYPE = 2
    BAD_ACCEPT = 10


class InvalidPattern(RoutingError):
    """A regex match plan does not compile."""

    BAD_REGEX = 20
