"""
URL slug helpers.

Company slugs are unique across the whole site, job slugs are unique within
their company. Both are derived from a display name and then resolved against
a snapshot of the slugs already taken in the same namespace.
"""
import re
from typing import Collection


# Input is lower-cased first; only ASCII letters and digits survive
_STRIP_CHARS = re.compile(r"[^a-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(text: str) -> str:
    """
    Convert text to a URL-friendly slug.

    Example:
        slugify("Senior Frontend Developer!") == "senior-frontend-developer"
    """
    slug = text.lower().strip()
    slug = _STRIP_CHARS.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return _EDGE_HYPHENS.sub("", slug)


def ensure_unique_slug(base_slug: str, existing_slugs: Collection[str]) -> str:
    """
    Return base_slug, or base_slug with the smallest numeric suffix that is
    not in existing_slugs.

    existing_slugs is a snapshot owned by the caller; callers that assign
    several slugs in one pass must add each accepted slug to it.
    """
    slug = base_slug
    counter = 1
    
    while slug in existing_slugs:
        slug = f"{base_slug}-{counter}"
        counter += 1
    
    return slug
