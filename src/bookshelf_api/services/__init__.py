"""
bookshelf_api.services

Service layer.

Responsibilities:
- Framework-free rules used by routers (input validation).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services return results instead of raising; routers map them to `ApiError`s.
