"""Frontmatter splitting and decoding of the recognized metadata fields"""

import datetime
from dataclasses import dataclass
from typing import Any, Optional, Union

import yaml

from mdsite.core.errors import ParseError
from mdsite.core.models import Frontmatter
from mdsite.core.utils.slug import slugify


MARKER = '---'
RECOGNIZED = {'title', 'date', 'tags', 'slug', 'template'}


@dataclass(frozen=True)
class ParsedMarkdown:
    frontmatter: Frontmatter
    body: str
    body_line: int          # lines consumed by the metadata block


def split_frontmatter(text: str) -> tuple[Optional[str], str, int]:
    """Return (metadata_text, body, body_line); metadata_text is None when absent.

    Raises ValueError when the opening marker is never closed.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != MARKER:
        return None, text, 0

    for i in range(1, len(lines)):
        if lines[i].strip() == MARKER:
            return ''.join(lines[1:i]), ''.join(lines[i + 1:]), i + 1
    raise ValueError("unterminated frontmatter block (missing closing '---')")


def normalize_tags(value: Any) -> tuple[str, ...]:
    """Accept a comma-separated string or a list; trim, lowercase, drop empties and repeats."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value if v is not None]
    else:
        items = [str(value)]
    tags = (t.strip().lower() for t in items)
    return tuple(dict.fromkeys(t for t in tags if t))


def parse_date(value: Any) -> Optional[datetime.date]:
    """Coerce a YAML value to a calendar date; None stays None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValueError(f"invalid date {value!r} (expected YYYY-MM-DD)") from e


def _decode(fm_text: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(fm_text) if fm_text.strip() else {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML frontmatter: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    return {str(k): v for k, v in data.items()}


def parse_frontmatter(raw: Union[bytes, str], source: str) -> ParsedMarkdown:
    """Split raw file content and decode its metadata block.

    A file without a block has empty metadata, so it still fails on the
    required title. The default slug is derived from the source file name.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise ParseError(source, f"not valid UTF-8: {e}") from e
    else:
        raw = raw.removeprefix('\ufeff')

    try:
        fm_text, body, body_line = split_frontmatter(raw)
        data = _decode(fm_text) if fm_text is not None else {}
        date = parse_date(data.get('date'))
    except ValueError as e:
        raise ParseError(source, str(e)) from e

    title = data.get('title')
    title = str(title).strip() if title is not None else ''
    if not title:
        raise ParseError(source, "missing required frontmatter field 'title'")

    stem = source.rsplit('/', 1)[-1].rsplit('.', 1)[0]
    slug = data.get('slug')
    template = data.get('template')
    frontmatter = Frontmatter(
        title=title,
        date=date,
        tags=normalize_tags(data.get('tags')),
        slug=slugify(str(slug)) if slug else slugify(stem),
        template=str(template).strip() if template else None,
        extra={k: v for k, v in data.items() if k not in RECOGNIZED},
    )
    return ParsedMarkdown(frontmatter=frontmatter, body=body, body_line=body_line)
