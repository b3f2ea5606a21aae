"""Database package: engine, session, base."""

from gymtracker.db.session import async_session_maker, get_db

__all__ = ["async_session_maker", "get_db"]
