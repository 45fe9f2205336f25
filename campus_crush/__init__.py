"""
Campus Crush
College-scoped anonymous rating service.

Architecture:
- Relational database (PostgreSQL, SQLite for tests): users, ratings, leaderboards
- FastAPI: JSON API under /api
- In-process cache + monitoring buffers
"""

__version__ = "1.0.0"
