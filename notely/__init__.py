"""A Flask JSON web service, backed by SQLite, for users and their notes, authenticated by API key."""

__version__ = "0.1.0"