#!/usr/bin/env python3
"""
Route Table Validation Script.

Loads routes.yaml (plus the environment overlay) and checks every route
list, including nested sub-route lists, before the table is deployed.
Optionally resolves sample paths against the table:

    scripts/validate_routes.py --config-dir config --env production \\
        --path /users/42 --path "POST /users"
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from routekit.config import ConfigLoader
from routekit.exceptions import RoutingError
from routekit.routing import compile_pattern, validate_routes


def check_route_list(routes, depth=0):
    """Validate a route list and its sub-route lists, returning the route count."""
    count = 0
    for route in validate_routes(routes):
        count += 1
        indent = "   " * depth
        target = route.action if route.action is not None else f"{len(route.routes)} sub-routes"
        print(f"{indent}   ✅ {route.type:<12} {route.pattern or '-':<30} -> {target}")

        if route.type == "regex" and isinstance(route.pattern, str):
            compile_pattern(route.pattern)

        if route.routes:
            count += check_route_list(route.routes, depth + 1)
    return count


def main():
    parser = argparse.ArgumentParser(description="Validate a routekit route table")
    parser.add_argument("--config-dir", default=None, help="Directory holding routes.yaml")
    parser.add_argument("--env", default=None, help="Environment overlay to apply")
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Sample request to resolve, as '/path' or 'METHOD /path' (repeatable)"
    )
    args = parser.parse_args()

    print("🧭 Validating route table")
    print("=" * 50)

    try:
        config = ConfigLoader(args.config_dir).load_config(args.env)
        print(f"\n1️⃣ Loaded {len(config.routes)} top-level routes")

        total = check_route_list(config.routes)
        print(f"\n   ✅ {total} routes valid")
    except RoutingError as e:
        print(f"   ❌ {type(e).__name__} (code {e.code}): {e}")
        return 1

    if args.path:
        print("\n2️⃣ Resolving sample requests")
        router = config.create_router()
        for sample in args.path:
            method, _, path = sample.rpartition(" ")
            match = router.match_path(path, method=method or "GET")
            if match is None:
                print(f"   ⚠️  {sample}: no route")
            else:
                print(f"   ✅ {sample}: {match.action} tokens={match.tokens}")

    print("\n🎉 Route table is valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
