"""
bookshelf_api.i18n

Localization package.

Responsibilities:
- JSON message catalogs shipped under `messages/`.
- Locale negotiation and key translation (`catalog`).
- Per-request locale resolution (`middleware`).
"""

from bookshelf_api.i18n.catalog import (
    MessageCatalog,
    Translator,
    negotiate_locale,
    normalize_locale,
    parse_accept_language,
)
from bookshelf_api.i18n.middleware import LocaleMiddleware

__all__ = [
    "LocaleMiddleware",
    "MessageCatalog",
    "Translator",
    "negotiate_locale",
    "normalize_locale",
    "parse_accept_language",
]
