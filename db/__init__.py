"""Database package for MongoDB operations using Beanie ODM.

Modules:
    manager: DatabaseManager singleton for connection handling
    models: Beanie Document models

Usage:
    from db import db_manager, UserTripsDocument

    await db_manager.init_beanie()
    doc = await UserTripsDocument.find_one(UserTripsDocument.user_id == "abc")
"""

from __future__ import annotations

from db.manager import DatabaseManager, db_manager
from db.models import ALL_DOCUMENT_MODELS, UserTripsDocument

__all__ = [
    "ALL_DOCUMENT_MODELS",
    "DatabaseManager",
    "UserTripsDocument",
    "db_manager",
]
