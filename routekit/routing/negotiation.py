"""
Accept header content negotiation.

Chooses the mime type a route offers that best satisfies the request's
Accept header, using quality values and wildcard media ranges.
"""

import re
from functools import lru_cache
from typing import Dict, Optional, Pattern, Sequence

from routekit.config import get_logger

logger = get_logger(__name__)

# Absence of an Accept header means any media type is acceptable
DEFAULT_ACCEPT = "*/*"
DEFAULT_QUALITY = 1.0

# Only q=1, q=1.0 and q=0.<digits> are read as a quality; any other
# parameter stays part of the media range key.
_QUALITY_SUFFIX = re.compile(r";q=(1|1\.0|0\.\d+)$")


@lru_cache(maxsize=256)
def _wildcard_regex(media_range: str) -> Pattern:
    """Compile a lowercased media range with * wildcards to an anchored regex."""
    parts = [re.escape(part) for part in media_range.split("*")]
    return re.compile("^" + ".*".join(parts) + "$")


def parse_accept_header(accept_header: str) -> Dict[str, float]:
    """
    Parse an Accept header into media ranges and their quality values.

    Args:
        accept_header: Raw Accept header value

    Returns:
        Media range to quality, in header order. A media range listed more
        than once keeps its first position and its last quality.

    Examples:
        "text/html;q=0.5, application/json" -> {"text/html": 0.5, "application/json": 1.0}
    """
    ranges: Dict[str, float] = {}

    for entry in accept_header.split(","):
        entry = entry.strip()
        quality = DEFAULT_QUALITY
        suffix = _QUALITY_SUFFIX.search(entry)
        if suffix:
            quality = float(suffix.group(1))
            entry = entry[:suffix.start()]
        ranges[entry] = quality

    return ranges


def media_range_matches(media_range: str, mime_type: str) -> bool:
    """
    Check if a mime type falls within a media range.

    Comparison is case-insensitive; each * in the media range matches any
    run of characters and the whole mime type must match.
    """
    media_range = media_range.lower()
    mime_type = mime_type.lower()
    if "*" in media_range:
        return _wildcard_regex(media_range).match(mime_type) is not None
    return media_range == mime_type


class ContentNegotiator:
    """
    Selects the best offered mime type for an Accept header.

    Preference among equally weighted types follows the order in which
    the route offers them, never the order of the header.
    """

    def negotiate(self, offered: Sequence[str], accept_header: Optional[str]) -> Optional[str]:
        """
        Choose a mime type from the offered list.

        Args:
            offered: Mime types the route can produce, most preferred first
            accept_header: Raw Accept header value, or None if absent

        Returns:
            The chosen mime type as spelled in offered, or None if the
            header accepts none of them
        """
        if accept_header is None:
            accept_header = DEFAULT_ACCEPT

        ranges = parse_accept_header(accept_header)

        qualities: Dict[str, float] = {}
        for mime_type in offered:
            for media_range, quality in ranges.items():
                if media_range_matches(media_range, mime_type):
                    qualities[mime_type] = quality

        if not qualities:
            logger.debug(
                "No acceptable mime type",
                extra={"offered": list(offered), "accept": accept_header}
            )
            return None

        chosen = None
        best = -1.0
        for mime_type, quality in qualities.items():
            if quality > best:
                chosen = mime_type
                best = quality

        return chosen
