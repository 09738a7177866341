# specflow/lib/slug.py
"""
URL-safe slug derivation for project names.
"""
import re
import uuid
from typing import Awaitable, Callable


MAX_SLUG_LENGTH = 60


def slugify(name: str) -> str:
    """
    "Test Project" -> "test-project"

    Lowercase, every run of non-alphanumerics becomes one hyphen, no
    leading or trailing hyphens. Falls back to "project" when nothing
    usable is left.
    """
    slug = re.sub(r'[^a-z0-9]+', '-', (name or "").lower())
    slug = re.sub(r'-+', '-', slug).strip('-')
    slug = slug[:MAX_SLUG_LENGTH].rstrip('-')
    return slug or "project"


def suffixed_slug(name: str) -> str:
    """slugify(name) plus a random 4-char suffix."""
    return f"{slugify(name)}-{str(uuid.uuid4())[:4]}"


async def unique_slug(name: str, exists: Callable[[str], Awaitable[bool]]) -> str:
    """Derive a slug and append a 4-char suffix until it is unused."""
    slug = slugify(name)
    while await exists(slug):
        slug = suffixed_slug(name)
    return slug
