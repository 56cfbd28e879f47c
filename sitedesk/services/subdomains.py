from __future__ import annotations

import re
from uuid import uuid4

_DISALLOWED_SUBDOMAIN_CHARS = re.compile(r"[^a-zA-Z0-9/-]+")


def sanitize_subdomain(value: str | None) -> str:
    if not value:
        return ""
    return _DISALLOWED_SUBDOMAIN_CHARS.sub("", value)


def generate_subdomain() -> str:
    return uuid4().hex


def subdomain_for_create(value: str | None) -> str:
    """Sanitized subdomain for a new application; never empty."""
    return sanitize_subdomain(value) or generate_subdomain()


def subdomain_for_update(value: str | None, current: str | None) -> str | None:
    """Sanitized subdomain, or the caller-supplied current value when nothing survives."""
    return sanitize_subdomain(value) or current
