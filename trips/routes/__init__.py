"""Trip API routes."""

from trips.routes import assistant, crud, items

__all__ = ["assistant", "crud", "items"]
