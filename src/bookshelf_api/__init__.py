"""
bookshelf_api

Bookshelf: a versioned books CRUD API with rate limiting, JWT auth, ETag caching and
localized responses.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
