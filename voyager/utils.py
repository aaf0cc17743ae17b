"""
Identifier and slug helpers shared by the storage layer and routes
"""

import re
import uuid

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def new_id(prefix: str = "") -> str:
    """Generate a short unique id, e.g. "t3f9a0c2e71bd" for a trip."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def generate_slug(title: str) -> str:
    """Turn a title into its URL slug: "Côte d'Azur Escape" -> "cte-dazur-escape"."""
    slug = _NON_SLUG_CHARS.sub("", title.lower().strip())
    slug = _SLUG_SEPARATORS.sub("-", slug)
    return slug.strip("-")


def match_slug(title: str, slug: str) -> bool:
    return generate_slug(title) == slug
