"""
Utility helper functions for the request router.

This module provides request path normalization and helpers that build a
RequestContext from the request objects of common Python web stacks.

Normalizing paths before matching matters for SEO and analytics: search
engines treat example.com/foo and example.com/foo/ as different URLs. When
the normalized path differs from the original, callers may redirect or
emit a canonical URL.
"""

import posixpath
import re
from typing import Any, Dict, Iterable, Mapping, Optional

from starlette.requests import Request

from routekit.models.route import RequestContext


def normalize_path(path: str) -> str:
    """
    Normalize a URL path by collapsing repeated slashes.

    Args:
        path: Path to normalize

    Returns:
        Normalized path, always starting with a slash

    Examples:
        "/api//users" -> "/api/users"
        "api/users" -> "/api/users"
        "" -> "/"
    """
    if not path:
        return "/"

    path = re.sub(r'/+', '/', path)

    if not path.startswith('/'):
        path = '/' + path

    return path


def ending_slash(path: str, excludes: Iterable[str] = ()) -> str:
    """
    Add a trailing slash to paths that look like directory requests.

    A path looks like a directory when its last segment has no dot.

    Args:
        path: URL path
        excludes: Regexes for paths that must be left alone

    Returns:
        The path, with a trailing slash added when needed

    Examples:
        "/foo/bar" -> "/foo/bar/"
        "/foo/bar.html" -> "/foo/bar.html"
    """
    for regex in excludes:
        if re.search(regex, path):
            return path

    base = posixpath.basename(path)

    if not path.endswith("/") and "." not in base:
        path += "/"

    return path


def directory_index(path: str, index_files: Iterable[str]) -> str:
    """
    Strip a directory index file name from the end of a path.

    Args:
        path: URL path
        index_files: File names to remove, e.g. index.html. The first one
                     found is removed and the trailing slash is kept.

    Returns:
        The path without the index file name

    Examples:
        ("/foo/bar/index.html", ["index.html"]) -> "/foo/bar/"
    """
    for name in index_files:
        if path.endswith("/" + name):
            return path[:-len(name)]

    return path


def strip_prefix(path: str, prefixes: Iterable[str]) -> str:
    """
    Remove a prefix common to all routes from the start of a path.

    Args:
        path: URL path
        prefixes: Prefixes to try in order; only the first match is removed

    Returns:
        The path without the prefix

    Examples:
        ("/foo/bar/index.html", ["/foo"]) -> "/bar/index.html"
        ("/bar/foo/index.html", ["/foo"]) -> "/bar/foo/index.html"
    """
    for prefix in prefixes:
        if prefix and path.startswith(prefix):
            return path[len(prefix):]

    return path


def normalize_request_path(path: str, settings: Any) -> str:
    """
    Apply the normalizations enabled in the router settings.

    Order: collapse slashes, strip prefixes, strip directory index files,
    then add an ending slash.

    Args:
        path: Request path
        settings: RouterSettings

    Returns:
        Normalized path
    """
    if settings.collapse_slashes:
        path = normalize_path(path)
    if settings.strip_prefixes:
        path = strip_prefix(path, settings.strip_prefixes)
    if settings.directory_index:
        path = directory_index(path, settings.directory_index)
    if settings.ending_slash:
        path = ending_slash(path, settings.ending_slash_excludes)
    return path


def header_name_from_environ(key: str) -> Optional[str]:
    """
    Convert a WSGI environ key to an HTTP header name.

    Examples:
        "HTTP_HOST" -> "Host"
        "HTTP_X_FORWARDED_FOR" -> "X-Forwarded-For"
        "CONTENT_TYPE" -> "Content-Type"
        "PATH_INFO" -> None
    """
    if key.startswith("HTTP_"):
        key = key[5:]
    elif key not in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        return None

    return "-".join(part.capitalize() for part in key.split("_"))


def request_context_from_environ(environ: Mapping[str, Any]) -> RequestContext:
    """
    Build a request context from a WSGI environ.

    Args:
        environ: WSGI environ mapping

    Returns:
        Request context with path, method, host, headers and Accept value
    """
    headers: Dict[str, str] = {}
    for key, value in environ.items():
        name = header_name_from_environ(key)
        if name is not None:
            headers[name] = str(value)

    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")

    return RequestContext(
        path=path or "/",
        method=environ.get("REQUEST_METHOD"),
        host=environ.get("HTTP_HOST") or environ.get("SERVER_NAME"),
        headers=headers,
        accept=environ.get("HTTP_ACCEPT")
    )


def request_context_from_starlette(request: Request) -> RequestContext:
    """
    Build a request context from a Starlette request.

    Args:
        request: Starlette (or FastAPI) request

    Returns:
        Request context with path, method, host, headers and Accept value
    """
    headers = dict(request.headers.items())

    return RequestContext(
        path=request.url.path,
        method=request.method,
        host=request.headers.get("host"),
        headers=headers,
        accept=request.headers.get("accept")
    )
