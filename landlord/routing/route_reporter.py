"""
Lists the routes registered on a FastAPI / Starlette application.
"""

import pprint
from dataclasses import dataclass
from typing import Iterable, List, Optional

from starlette.routing import BaseRoute, Mount, Route, WebSocketRoute

from ..config.log_sink import LogSink, resolve_log_sink


@dataclass(frozen=True)
class RouteInfo:
    method: str
    route: str


def _walk(routes: Iterable[BaseRoute], prefix: str = "") -> List[RouteInfo]:
    found = []
    for route in routes:
        included = getattr(route, "original_router", None)
        if included is not None:
            # Newer FastAPI keeps included routers as a node instead of copying their routes
            found.extend(_walk(included.routes, prefix + route.include_context.prefix))
        elif isinstance(route, Mount):
            found.extend(_walk(route.routes or [], prefix + route.path))
        elif isinstance(route, WebSocketRoute):
            found.append(RouteInfo("websocket", prefix + route.path))
        elif isinstance(route, Route):
            # Starlette adds HEAD to every GET route
            methods = sorted(route.methods or {"GET"})
            if "GET" in methods:
                methods = [m for m in methods if m != "HEAD"]
            found.extend(RouteInfo(method.lower(), prefix + route.path) for method in methods)
    return found


def get_routes(app) -> List[RouteInfo]:
    """Return one entry per (method, path) registered on ``app``."""
    return _walk(app.routes)


def print_routes(app, log: Optional[LogSink] = None):
    """Log the routes of ``app``."""
    log = resolve_log_sink(log)
    log(pprint.pformat([(r.method, r.route) for r in get_routes(app)]))
