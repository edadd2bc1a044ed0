"""
bookshelf_api.i18n.catalog

Message catalogs and locale negotiation.

Responsibilities:
- Load per-locale message files once into an immutable `locale -> key -> template` map.
- Negotiate a supported locale from an `Accept-Language` header (pure function).
- Resolve keys through the chain `locale -> language -> default locale -> raw key`.

Lookups never raise: a missing key or a bad template degrades to text, not to an error.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from importlib import resources
from types import MappingProxyType
from typing import Any

import structlog

log = structlog.get_logger(__name__)

MESSAGES_PACKAGE = "bookshelf_api.i18n"
MESSAGES_DIR = "messages"


def normalize_locale(tag: str) -> str:
    """`fr-ca` / `fr_CA` -> `fr_CA`; `EN` -> `en`."""
    parts = tag.strip().replace("-", "_").split("_")
    language = parts[0].lower()
    if len(parts) == 1 or not parts[1]:
        return language
    return f"{language}_{parts[1].upper()}"


def _language(locale: str) -> str:
    return locale.split("_", 1)[0]


def _quality(params: list[str]) -> float | None:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value)
            except ValueError:
                return None
    return 1.0


def parse_accept_language(header: str | None) -> list[str]:
    """
    Return the language tags of an Accept-Language header, most preferred first.

    Entries with `q=0` or an unparsable weight are dropped; parameters other than `q`
    are ignored; ties keep header order.
    """
    if not header:
        return []
    weighted: list[tuple[float, int, str]] = []
    for position, entry in enumerate(header.split(",")):
        tag, *params = entry.split(";")
        tag = tag.strip()
        if not tag:
            continue
        quality = _quality(params)
        if quality is None or quality <= 0:
            continue
        weighted.append((-quality, position, tag))
    return [tag for _, _, tag in sorted(weighted)]


def negotiate_locale(header: str | None, supported: Iterable[str], default: str) -> str:
    by_normalized = {normalize_locale(s): s for s in supported}
    for tag in parse_accept_language(header):
        if tag == "*":
            continue
        wanted = normalize_locale(tag)
        if wanted in by_normalized:
            return by_normalized[wanted]
        language = _language(wanted)
        if language in by_normalized:
            return by_normalized[language]
    return default


class MessageCatalog:
    def __init__(self, messages: Mapping[str, Mapping[str, str]], *, default_locale: str) -> None:
        self._messages: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {
                normalize_locale(loc): MappingProxyType(dict(entries))
                for loc, entries in messages.items()
            }
        )
        self.default_locale = normalize_locale(default_locale)

    @classmethod
    def load(cls, locales: Iterable[str], *, default_locale: str) -> MessageCatalog:
        messages: dict[str, dict[str, str]] = {}
        root = resources.files(MESSAGES_PACKAGE).joinpath(MESSAGES_DIR)
        for locale in locales:
            source = root.joinpath(f"{normalize_locale(locale)}.json")
            if not source.is_file():
                log.warning("message_catalog_missing", locale=locale)
                continue
            messages[locale] = json.loads(source.read_text(encoding="utf-8"))
        return cls(messages, default_locale=default_locale)

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(self._messages)

    def resolve(self, key: str, locale: str | None) -> str | None:
        for candidate in self._chain(locale):
            template = self._messages.get(candidate, {}).get(key)
            if template is not None:
                return template
        return None

    def translate(self, key: str, locale: str | None, *params: Any) -> str:
        template = self.resolve(key, locale)
        if template is None:
            return key
        if not params:
            return template
        try:
            return template.format(*params)
        except (IndexError, KeyError, ValueError):
            log.warning("message_format_failed", key=key, locale=locale)
            return template

    def _chain(self, locale: str | None) -> list[str]:
        chain: list[str] = []
        if locale:
            normalized = normalize_locale(locale)
            chain += [normalized, _language(normalized)]
        chain += [self.default_locale, _language(self.default_locale)]
        # De-duplicate while keeping order.
        return list(dict.fromkeys(chain))


class Translator:
    """
    A catalog bound to one request's negotiated locale.
    """

    __slots__ = ("catalog", "locale")

    def __init__(self, catalog: MessageCatalog, locale: str) -> None:
        self.catalog = catalog
        self.locale = locale

    def __call__(self, key: str, *params: Any) -> str:
        return self.catalog.translate(key, self.locale, *params)

    def field(self, name: str) -> str:
        return self.catalog.resolve(f"field.{name}", self.locale) or name


# --- Module Notes -----------------------------------------------------------
# Templates use positional `{0}` placeholders, filled with `str.format`.
