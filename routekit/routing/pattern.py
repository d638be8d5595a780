"""
Pattern matching primitive for the request router.

This module decides whether a single match plan matches a target string
and extracts the tokens captured along the way.
"""

import re
from functools import lru_cache
from typing import Any, List, Optional, Pattern, Union

from routekit.config import get_logger
from routekit.exceptions import InvalidMatchType, InvalidPattern
from routekit.models.route import LiteralPlan, OneOfPlan, PlanType, TypedPlan, coerce_plan

logger = get_logger(__name__)

# A match yields a list of captured tokens, or for starts_with the raw
# remainder of the target after the prefix.
PatternTokens = Union[List[str], str]


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> Pattern:
    """
    Compile a regex pattern, caching the result.

    Args:
        pattern: Regular expression source

    Returns:
        Compiled pattern

    Raises:
        InvalidPattern: If the pattern does not compile
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.error(
            "Invalid regex pattern",
            extra={"pattern": pattern, "error": str(e)}
        )
        raise InvalidPattern(f"Invalid regex {pattern}: {e}", InvalidPattern.BAD_REGEX) from e


class PatternMatcher:
    """
    Matches targets against literal, membership, exact, prefix and regex plans.

    The matcher is stateless; compiled regexes live in a module level
    cache shared by all instances.
    """

    def match(self, plan: Any, target: str) -> Optional[PatternTokens]:
        """
        Match a target string against a plan.

        Args:
            plan: Plan object, scalar, list of scalars or {type, pattern} mapping
            target: String to test

        Returns:
            None if there is no match. Otherwise the captured tokens: an empty
            list when nothing was captured, the list of regex group values,
            or the remainder of the target for a starts_with prefix match.

        Raises:
            InvalidMatchType: If the plan is malformed
            InvalidPattern: If a regex plan does not compile
        """
        plan = coerce_plan(plan)

        if isinstance(plan, LiteralPlan):
            return [] if plan.value == target else None

        if isinstance(plan, OneOfPlan):
            return [] if target in plan.values else None

        if isinstance(plan, TypedPlan):
            return self._match_typed(plan, target)

        raise InvalidMatchType("Invalid match plan", InvalidMatchType.BAD_PLAN)

    def matches(self, plan: Any, target: str) -> bool:
        """Check if target matches plan."""
        return self.match(plan, target) is not None

    def _match_typed(self, plan: TypedPlan, target: str) -> Optional[PatternTokens]:
        if plan.type == PlanType.EXACT:
            return [] if plan.pattern == target else None

        if plan.type == PlanType.STARTS_WITH:
            if not target.startswith(plan.pattern):
                return None
            if target == plan.pattern:
                return []
            return target[len(plan.pattern):]

        if plan.type == PlanType.REGEX:
            regex = plan.pattern
            if not isinstance(regex, re.Pattern):
                regex = compile_pattern(regex)
            found = regex.search(target)
            if found is None:
                return None
            return list(found.groups(default=""))

        raise InvalidMatchType(f"Invalid type {plan.type}", InvalidMatchType.UNKNOWN_TYPE)
