"""
bookshelf_api.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for books and users.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; HTTP policy (ETags, envelopes) belongs in routers.
