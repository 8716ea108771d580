"""Slug generation for page identifiers"""

import re


_SLUG_RE = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug.

    Every run of characters outside [a-z0-9] becomes a single hyphen, so the
    result is a fixed point: slugify(slugify(x)) == slugify(x).
    """
    slug = _SLUG_RE.sub('-', text.strip().lower()).strip('-')
    return slug or 'page'
