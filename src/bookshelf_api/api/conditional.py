"""
bookshelf_api.api.conditional

Content fingerprints (ETags) and conditional request evaluation.

Responsibilities:
- Derive a deterministic tag from a resource or collection's canonical JSON form.
- Decide conditional GET (`If-None-Match`) and optimistic-concurrency PUT (`If-Match`)
  outcomes as plain values; routers turn them into responses.

Note:
- Tags are computed from the data before serialization, so response compression
  never changes them.
- `If-Match` is opt-in: writers that omit it are not protected against lost updates.
"""

from __future__ import annotations

import enum
import hashlib
import json
from typing import Any

from fastapi.encoders import jsonable_encoder

WILDCARD = "*"


class Precondition(enum.StrEnum):
    ok = "OK"
    not_found = "NOT_FOUND"
    failed = "FAILED"


def fingerprint(content: Any) -> str:
    canonical = json.dumps(
        jsonable_encoder(content), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def quote_etag(tag: str) -> str:
    return f'"{tag}"'


def parse_entity_tags(header: str | None) -> list[str]:
    """`W/"a", "b", *` -> `["a", "b", "*"]`."""
    if header is None:
        return []
    tags: list[str] = []
    for raw in header.split(","):
        tag = raw.strip()
        if tag.startswith("W/"):
            tag = tag[2:]
        tag = tag.strip('"')
        if tag:
            tags.append(tag)
    return tags


def is_not_modified(if_none_match: str | None, current_tag: str) -> bool:
    tags = parse_entity_tags(if_none_match)
    return WILDCARD in tags or current_tag in tags


def evaluate_if_match(if_match: str | None, current_tag: str | None) -> Precondition:
    """
    `current_tag` is None when the resource does not exist.
    """
    if if_match is None:
        return Precondition.ok
    if current_tag is None:
        return Precondition.not_found
    tags = parse_entity_tags(if_match)
    if WILDCARD in tags or current_tag in tags:
        return Precondition.ok
    return Precondition.failed
