"""Navigation API routes."""

from navigation.routes import places, route, tracking

__all__ = ["places", "route", "tracking"]
