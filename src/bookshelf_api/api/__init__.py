"""
bookshelf_api.api

API package for the Bookshelf service.

Responsibilities:
- FastAPI app factory and router modules.
- Envelope, conditional-request helpers and exception handlers shared by routers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers own HTTP policy (ETags, envelopes, status codes); repositories own SQL.
