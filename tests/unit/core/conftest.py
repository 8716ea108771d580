"""Shared fixtures for core unit tests"""

import datetime

import pytest

from mdsite.core.models import Document


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """Factory for compiled Documents without touching the filesystem."""
    def _make(path: str, title: str = None, date: str = None, tags=(), slug: str = None, body=("<p>x</p>\n",), **kw):
        stem = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
        return Document(
            path=path,
            slug=slug or stem,
            title=title or stem.upper(),
            date=datetime.date.fromisoformat(date) if date else None,
            tags=tuple(tags),
            body=tuple(body),
            **kw,
        )
    return _make
