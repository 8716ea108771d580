"""Template loading and slot filling for finished pages"""

import re
from html import escape
from pathlib import Path, PurePosixPath
from typing import Any

from mdsite.core.errors import TemplateError
from mdsite.core.fragments import tag_badges
from mdsite.core.models import Document, RenderOptions, Template


SLOT_RE = re.compile(r'\{\{\s*([A-Za-z_][\w.-]*)\s*\}\}')
RAW_SLOTS = {'content', 'tags'}     # already HTML; inserted unescaped


def make_template(name: str, source: str, path: str = '') -> Template:
    return Template(
        name=name,
        path=path,
        source=source,
        slots=frozenset(SLOT_RE.findall(source)),
    )


def load_templates(paths: list[str], root: Path, template_dir: str = 'templates') -> dict[str, Template]:
    """Read templates keyed by name: the path under template_dir without its suffix."""
    templates: dict[str, Template] = {}
    for rel in paths:
        name = PurePosixPath(rel).relative_to(template_dir).with_suffix('').as_posix()
        source = (root / rel).read_text(encoding='utf-8')
        templates[name] = make_template(name, source, rel)
    return templates


def page_context(doc: Document, options: RenderOptions) -> dict[str, Any]:
    """Slot values for one resolved document; text values are escaped, HTML values are not."""
    context: dict[str, Any] = {
        'title':    doc.title,
        'content':  doc.html,
        'tags':     tag_badges(doc.tags),
        'keywords': ', '.join(doc.tags),
        'date':     options.format_date(doc.date),
        'slug':     doc.slug,
        'url':      doc.url(options.base_url),
        'path':     doc.path,
    }
    for key, value in doc.meta.items():
        context[f'meta.{key}'] = '' if value is None else value
    return context


def fill(template: Template, context: dict[str, Any]) -> str:
    """Substitute every {{ slot }}; slots without a value render empty."""
    def _sub(m: re.Match) -> str:
        name = m.group(1)
        value = context.get(name, '')
        return str(value) if name in RAW_SLOTS else escape(str(value))
    return SLOT_RE.sub(_sub, template.source)


def select_template(doc: Document, templates: dict[str, Template], default: str = 'base') -> Template:
    name = doc.template or default
    if name not in templates:
        raise TemplateError(doc.path, f"template '{name}' not found")
    return templates[name]


def apply_template(doc: Document, template: Template, options: RenderOptions) -> str:
    """Wrap a resolved document in a page template. Pure function of its inputs."""
    return fill(template, page_context(doc, options))
