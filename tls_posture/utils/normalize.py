from __future__ import annotations

from ..errors import InvalidDomain


def normalize_domain(domain: str) -> str:
    value = domain.strip().lower()
    value = value.rstrip(".")
    return value


def validate_domain(domain: str) -> str:
    """Return the normalized domain, or raise ``InvalidDomain``.

    Only the basic shape is checked: non-empty after trimming and at least one
    dot. The assessment service does its own hostname validation.
    """
    if not domain.strip():
        raise InvalidDomain("domain must not be empty")
    normalized = normalize_domain(domain)
    if "." not in normalized:
        raise InvalidDomain("domain must look like a hostname (e.g. example.com)")
    return normalized
