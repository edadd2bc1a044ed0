"""
bookshelf_api.auth

Authentication package.

Responsibilities:
- JWT issuing/verification (`jwt`) and bcrypt password hashing (`passwords`).
- FastAPI auth dependencies (`deps`) resolving an `Identity`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Tokens are never revoked server-side; there is no role model beyond "authenticated".
