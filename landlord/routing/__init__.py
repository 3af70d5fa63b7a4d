"""
Routing helpers: load route modules from disk and list registered routes.
"""

from .module_loader import load_routers
from .route_reporter import RouteInfo, get_routes, print_routes

__all__ = ["load_routers", "RouteInfo", "get_routes", "print_routes"]
