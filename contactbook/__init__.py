"""Contact book: a FastAPI + SQLite contacts API and its clients."""

__version__ = "0.1.0"
